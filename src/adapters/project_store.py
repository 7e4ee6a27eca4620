"""JSON-backed project model.

Why JSON:
- A plain document (configurations, targets, settings, files) is enough to
  drive setting resolution and the entitlements/Info.plist updates.
- `ProjectDocument` validates the file on load, so malformed projects fail
  before anything is mutated.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from core.domain.errors import ConfigurationError
from core.domain.models import BuildTarget, ProjectDocument


class JsonTarget:
    """`ProjectTarget` over a `BuildTarget` entry of a `ProjectDocument`."""

    def __init__(self, project: "JsonProject", spec: BuildTarget) -> None:
        self._project = project
        self._spec = spec

    def __repr__(self) -> str:
        return f"JsonTarget({self._spec.name!r}, kind={self._spec.kind.value!r})"

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def is_extension_kind(self) -> bool:
        return self._spec.kind.is_extension

    @property
    def is_test_kind(self) -> bool:
        return self._spec.kind.is_test

    def resolved_setting(self, name: str) -> dict[str, str | None]:
        out: dict[str, str | None] = {}
        for configuration in self._project.configurations:
            value = self._spec.settings.get(configuration, {}).get(name)
            if value is None:
                value = self._project.document.settings.get(configuration, {}).get(name)
            out[configuration] = value
        return out

    def set_setting(self, name: str, value: str) -> None:
        for configuration in self._project.configurations:
            self._spec.settings.setdefault(configuration, {})[name] = value


class JsonProject:
    """`ProjectModel` persisted as a JSON document."""

    def __init__(self, path: Path, document: ProjectDocument | None = None) -> None:
        self._path = path.expanduser().resolve()
        self.document = document or ProjectDocument()
        self._targets = [JsonTarget(self, spec) for spec in self.document.targets]

    @classmethod
    def load(cls, path: Path) -> "JsonProject":
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to open project {path}: {exc}") from exc
        try:
            document = ProjectDocument.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            raise ConfigurationError(f"Failed to parse project {path}: {exc}") from exc
        return cls(path, document)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def configurations(self) -> list[str]:
        return self.document.configurations

    @property
    def targets(self) -> list[JsonTarget]:
        return self._targets

    def register_file(self, relative_path: str) -> None:
        if relative_path not in self.document.files:
            self.document.files.append(relative_path)

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = self.document.model_dump(mode="json")
        self._path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
