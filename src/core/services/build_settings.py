"""Build setting lookup and macro expansion.

Settings may reference other settings with `$(NAME)` or `${NAME}`. Expansion
is recursive and evaluated per configuration; `SRCROOT` always expands to the
project directory placeholder (`.`), which callers later resolve against the
project's parent directory.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from core.domain.errors import ConfigurationError
from core.interfaces.project import ProjectModel, ProjectTarget

logger = logging.getLogger(__name__)

SRCROOT = "SRCROOT"
SRCROOT_PLACEHOLDER = "."

_MACRO_RE = re.compile(r"\$\(([^(){}]*)\)|\$\{([^(){}]*)\}")


def find_target(project: ProjectModel, target_name: str | None) -> ProjectTarget:
    """Target named `target_name`, or the first application target."""

    if target_name:
        for target in project.targets:
            if target.name == target_name:
                return target
        raise ConfigurationError(f"Target {target_name} not found")

    for target in project.targets:
        if not target.is_extension_kind and not target.is_test_kind:
            return target
    raise ConfigurationError("No application target found")


def project_parent(project: ProjectModel) -> Path:
    return Path(project.path).parent


def expand_path(relative_path: str, project: ProjectModel) -> Path:
    """Absolute path of a setting value relative to the project directory."""

    return (project_parent(project) / Path(relative_path).expanduser()).resolve()


class BuildSettingResolver:
    """Expands macros in build settings of a single target.

    Each top-level `resolve` call tracks the macro names currently being
    expanded. A name that is already in progress is treated as unresolved, so
    self-referential settings keep their marker text instead of recursing
    forever.
    """

    def __init__(self, project: ProjectModel) -> None:
        self._project = project

    def resolve(self, target_name: str | None, setting_name: str, configuration: str) -> str | None:
        """Expanded value of `setting_name`; raises if the target is missing."""

        target = find_target(self._project, target_name)
        return self.resolve_target(target, setting_name, configuration)

    def resolve_target(self, target: ProjectTarget, setting_name: str, configuration: str) -> str | None:
        return self._expand(target, setting_name, configuration, {setting_name})

    def _expand(
        self,
        target: ProjectTarget,
        setting_name: str,
        configuration: str,
        in_progress: set[str],
    ) -> str | None:
        value = target.resolved_setting(setting_name).get(configuration)
        if value is None:
            return None

        position = 0
        while True:
            match = _MACRO_RE.search(value, position)
            if match is None:
                break

            macro_name = match.group(1) if match.group(1) is not None else match.group(2)
            if macro_name == SRCROOT:
                expanded: str | None = SRCROOT_PLACEHOLDER
            elif macro_name in in_progress:
                logger.debug("Cyclic reference to %s in %s", macro_name, setting_name)
                expanded = None
            else:
                expanded = self._expand(
                    target,
                    macro_name,
                    configuration,
                    in_progress | {macro_name},
                )

            if expanded is None:
                position = match.end()
                continue

            value = value[: match.start()] + expanded + value[match.end() :]
            position = match.start() + len(expanded)

        return value
