"""Associated-domains entitlements.

Why a service:
- Both the setup path (adding domains) and the validation path (reading the
  domains already declared) go through the same `CODE_SIGN_ENTITLEMENTS`
  resolution and plist handling.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from adapters.plist_codec import read_plist, write_plist
from core.domain.models import (
    APPLINKS_PREFIX,
    ASSOCIATED_DOMAINS,
    CODE_SIGN_ENTITLEMENTS,
)
from core.interfaces.project import ProjectModel
from core.services.build_settings import BuildSettingResolver, expand_path, find_target
from core.services.change_tracker import ChangeTracker

logger = logging.getLogger(__name__)


def dedupe(values: Iterable[str]) -> list[str]:
    """Remove duplicates keeping the first occurrence."""

    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


class EntitlementsManager:
    def __init__(self, project: ProjectModel, changes: ChangeTracker | None = None) -> None:
        self._project = project
        self._resolver = BuildSettingResolver(project)
        self.changes = changes or ChangeTracker()

    def add_domains(
        self,
        target_name: str | None,
        domains: Sequence[str],
        remove_existing: bool,
        configuration: str,
    ) -> Path:
        """Add `applinks:` entries for `domains` and return the entitlements path.

        When the target has no entitlements file yet, one is created under
        `<target>/<target>.entitlements` and registered with the project.
        """

        target = find_target(self._project, target_name)
        relative_path = self._resolver.resolve_target(target, CODE_SIGN_ENTITLEMENTS, configuration)

        entitlements: dict[str, Any]
        current_domains: list[str]
        if relative_path is None:
            relative_path = f"{target.name}/{target.name}.entitlements"
            entitlements_path = expand_path(relative_path, self._project)

            target.set_setting(CODE_SIGN_ENTITLEMENTS, relative_path)
            self._project.register_file(relative_path)

            entitlements = {}
            current_domains = []
            self.changes.add(self._project.path)
            logger.info("Created entitlements file %s for %s", relative_path, target.name)
        else:
            entitlements_path = expand_path(relative_path, self._project)
            entitlements = read_plist(entitlements_path)
            current_domains = [] if remove_existing else list(entitlements.get(ASSOCIATED_DOMAINS) or [])

        current_domains += [f"{APPLINKS_PREFIX}{domain}" for domain in domains]
        entitlements[ASSOCIATED_DOMAINS] = dedupe(current_domains)

        write_plist(entitlements, entitlements_path)
        self.changes.add(entitlements_path)
        return entitlements_path

    def domains_from_project(self, target_name: str | None, configuration: str) -> list[str]:
        """Domains declared with `applinks:` in the target's entitlements.

        A target without `CODE_SIGN_ENTITLEMENTS` has no domains; a configured
        but unreadable file raises. Duplicates are returned as found.
        """

        target = find_target(self._project, target_name)
        relative_path = self._resolver.resolve_target(target, CODE_SIGN_ENTITLEMENTS, configuration)
        if relative_path is None:
            return []

        entitlements = read_plist(expand_path(relative_path, self._project))
        entries = entitlements.get(ASSOCIATED_DOMAINS) or []
        return [
            entry[len(APPLINKS_PREFIX):]
            for entry in entries
            if isinstance(entry, str) and entry.startswith(APPLINKS_PREFIX)
        ]
