"""Universal Link validation against published AASA files.

This module decides whether the identity a project declares
(`DEVELOPMENT_TEAM` + `PRODUCT_BUNDLE_IDENTIFIER`) is authorized by the AASA
file each of its domains publishes. Every operation returns its own result
value; diagnostics are never kept on the validator between calls.

Domains are checked one after another and all of them are checked: a failing
domain never hides the outcome of the others.
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

from pydantic import ValidationError

from core.domain.errors import ConfigurationError, ManifestFormatError
from core.domain.models import (
    APPLINKS,
    DEVELOPMENT_TEAM,
    PRODUCT_BUNDLE_IDENTIFIER,
    AppLinkDetail,
    IdentifierLookup,
    ValidationResult,
)
from core.interfaces.manifest import ManifestSource
from core.interfaces.project import ProjectModel
from core.services.build_settings import BuildSettingResolver, find_target
from core.services.change_tracker import ChangeTracker
from core.services.entitlements import EntitlementsManager, dedupe

logger = logging.getLogger(__name__)

NO_DOMAINS_MESSAGE = (
    "No Universal Link domains in project. "
    "Be sure each Universal Link domain is prefixed with applinks:."
)


def extract_team_and_bundle(identifier: str) -> tuple[str, str]:
    """Split `TEAM.com.example.app` into (`TEAM`, `com.example.app`)."""

    team, _, bundle = identifier.partition(".")
    return team, bundle


def parse_identifiers(data: bytes) -> list[str]:
    """Deduplicated `appID` values of an AASA document.

    Raises `ManifestFormatError` with a message naming the missing piece.
    """

    try:
        document = json.loads(data)
    except ValueError as exc:
        raise ManifestFormatError(f"Failed to parse AASA file: {exc}") from exc

    applinks = document.get(APPLINKS) if isinstance(document, dict) else None
    if applinks is None:
        raise ManifestFormatError(f"No {APPLINKS} found in AASA file")

    details = applinks.get("details") if isinstance(applinks, dict) else None
    if details is None:
        raise ManifestFormatError(f"No details found for {APPLINKS} in AASA file")
    if not isinstance(details, list):
        raise ManifestFormatError(f"Failed to parse AASA file: {APPLINKS}.details is not a list")

    identifiers: list[str] = []
    for raw in details:
        try:
            detail = AppLinkDetail.model_validate(raw)
        except ValidationError as exc:
            raise ManifestFormatError(f"Failed to parse AASA file: {exc}") from exc
        if isinstance(detail.app_id, str):
            identifiers.append(detail.app_id)

    identifiers = dedupe(identifiers)
    if not identifiers:
        raise ManifestFormatError("No appID found in AASA file")
    return identifiers


class DomainValidator:
    def __init__(
        self,
        project: ProjectModel,
        source: ManifestSource,
        changes: ChangeTracker | None = None,
    ) -> None:
        self._project = project
        self._source = source
        self._resolver = BuildSettingResolver(project)
        self.changes = changes or ChangeTracker()
        self._entitlements = EntitlementsManager(project, self.changes)

    def identifiers_for(self, domain: str) -> IdentifierLookup:
        fetched = self._source.fetch(domain)
        lookup = IdentifierLookup(domain=domain, diagnostics=list(fetched.diagnostics))
        if fetched.data is None:
            return lookup

        try:
            lookup.identifiers = parse_identifiers(fetched.data)
        except ManifestFormatError as exc:
            lookup.diagnostics.append(f"[{domain}] {exc}")
        return lookup

    def matches(self, target_name: str | None, domain: str, configuration: str) -> ValidationResult:
        target = find_target(self._project, target_name)
        bundle = self._resolver.resolve_target(target, PRODUCT_BUNDLE_IDENTIFIER, configuration)
        team = self._resolver.resolve_target(target, DEVELOPMENT_TEAM, configuration)

        lookup = self.identifiers_for(domain)
        if lookup.identifiers is None:
            return ValidationResult(valid=False, diagnostics=lookup.diagnostics)

        expected = f"{team or ''}.{bundle or ''}"
        result = ValidationResult(valid=expected in lookup.identifiers, diagnostics=lookup.diagnostics)
        if not result.valid:
            result.diagnostics.append(
                f"[{domain}] appID mismatch. Project: {expected}. AASA: {lookup.identifiers}"
            )
        return result

    def validate_all(
        self,
        target_name: str | None,
        domains: Sequence[str],
        remove_existing: bool,
        configuration: str,
    ) -> ValidationResult:
        if remove_existing:
            # Domains being removed are not validated.
            all_domains = list(domains)
        else:
            all_domains = dedupe(
                [*domains, *self._entitlements.domains_from_project(target_name, configuration)]
            )

        if not all_domains:
            return ValidationResult.failure(NO_DOMAINS_MESSAGE)

        result = ValidationResult()
        for domain in all_domains:
            domain_result = self.matches(target_name, domain, configuration)
            result.extend(domain_result)
            if domain_result.valid:
                logger.info("Valid Universal Link configuration for %s ✅", domain)
        return result

    def validate_project_domains(
        self,
        expected: Sequence[str],
        target_name: str | None,
        configuration: str,
    ) -> ValidationResult:
        project_domains = self._entitlements.domains_from_project(target_name, configuration)
        valid = len(expected) == len(project_domains) and sorted(expected) == sorted(project_domains)
        if valid:
            return ValidationResult()

        return ValidationResult.failure(
            "Project domains do not match :domains parameter",
            f"Project domains: {project_domains}",
            f":domains parameter: {list(expected)}",
        )

    def adopt_identity_from_manifest(self, target_name: str | None, domain: str) -> tuple[str, str]:
        """Copy team and bundle identifier from `domain`'s AASA into the project.

        The team is also written to the first test target so it keeps signing
        with the same team.
        """

        lookup = self.identifiers_for(domain)
        if lookup.identifiers is None:
            raise ConfigurationError("; ".join(lookup.diagnostics) or f"[{domain}] No appID found in AASA file")
        if len(lookup.identifiers) > 1:
            raise ConfigurationError("Multiple appIDs found in AASA file")

        team, bundle = extract_team_and_bundle(lookup.identifiers[0])

        target = find_target(self._project, target_name)
        target.set_setting(PRODUCT_BUNDLE_IDENTIFIER, bundle)
        target.set_setting(DEVELOPMENT_TEAM, team)

        test_target = next((t for t in self._project.targets if t.is_test_kind), None)
        if test_target is not None:
            test_target.set_setting(DEVELOPMENT_TEAM, team)

        self.changes.add(self._project.path)
        logger.info("Updated %s to team %s, bundle %s", target.name, team, bundle)
        return team, bundle
