"""Info.plist keys read by the Branch SDK at runtime."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Sequence

from adapters.plist_codec import read_plist, write_plist
from core.domain.errors import ConfigurationError
from core.domain.models import INFOPLIST_FILE, BranchKeys
from core.interfaces.project import ProjectModel
from core.services.build_settings import BuildSettingResolver, expand_path
from core.services.change_tracker import ChangeTracker

logger = logging.getLogger(__name__)

BRANCH_KEY = "branch_key"
BRANCH_UNIVERSAL_LINK_DOMAINS = "branch_universal_link_domains"


class InfoPlistUpdater:
    def __init__(
        self,
        project: ProjectModel,
        changes: ChangeTracker | None = None,
        *,
        short_link_suffix: str = "app.link",
    ) -> None:
        self._project = project
        self._resolver = BuildSettingResolver(project)
        self._short_link_suffix = short_link_suffix
        self.changes = changes or ChangeTracker()

    def set_branch_keys(self, target_name: str | None, keys: BranchKeys, configuration: str) -> Path:
        supplied = keys.supplied()
        if not supplied:
            raise ConfigurationError("At least one Branch key (live or test) is required")

        def apply(info_plist: dict[str, Any]) -> None:
            if len(supplied) > 1:
                info_plist[BRANCH_KEY] = supplied
            elif keys.live:
                info_plist[BRANCH_KEY] = keys.live
            else:
                info_plist[BRANCH_KEY] = keys.test

        return self._update(target_name, configuration, apply)

    def set_universal_link_domains(
        self,
        target_name: str | None,
        domains: Sequence[str],
        configuration: str,
    ) -> Path | None:
        """Store `domains` in the Info.plist.

        Short-link domains are recognized by the SDK without being listed, so
        nothing is touched when every domain is one of them.
        """

        if self._short_links_only(domains):
            logger.debug("Only %s domains supplied; Info.plist left unchanged", self._short_link_suffix)
            return None

        def apply(info_plist: dict[str, Any]) -> None:
            info_plist[BRANCH_UNIVERSAL_LINK_DOMAINS] = list(domains)

        return self._update(target_name, configuration, apply)

    def check_writable(
        self,
        target_name: str | None,
        domains: Sequence[str],
        keys: BranchKeys,
        configuration: str,
    ) -> Path | None:
        """Resolve and parse the Info.plist the other setters would write.

        Raises the same `ConfigurationError` they would, without touching any
        file. Returns None when neither keys nor listable domains are given.
        """

        if not keys.supplied() and self._short_links_only(domains):
            return None
        info_plist_path = self._locate(target_name, configuration)
        read_plist(info_plist_path)
        return info_plist_path

    def _short_links_only(self, domains: Sequence[str]) -> bool:
        return all(domain.endswith(self._short_link_suffix) for domain in domains)

    def _locate(self, target_name: str | None, configuration: str) -> Path:
        relative_path = self._resolver.resolve(target_name, INFOPLIST_FILE, configuration)
        if relative_path is None:
            raise ConfigurationError(f"Info.plist not found for configuration {configuration}")
        return expand_path(relative_path, self._project)

    def _update(
        self,
        target_name: str | None,
        configuration: str,
        apply: Callable[[dict[str, Any]], None],
    ) -> Path:
        info_plist_path = self._locate(target_name, configuration)
        info_plist = read_plist(info_plist_path)

        apply(info_plist)

        write_plist(info_plist, info_plist_path)
        self.changes.add(info_plist_path)
        return info_plist_path
