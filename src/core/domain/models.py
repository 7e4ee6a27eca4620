"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to I/O libraries.
- Normalizes data coming from project files and remote AASA files.

Note:
- These models describe *what* the information is, not *how* it is obtained.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


ASSOCIATED_DOMAINS = "com.apple.developer.associated-domains"
APPLINKS = "applinks"
APPLINKS_PREFIX = f"{APPLINKS}:"

CODE_SIGN_ENTITLEMENTS = "CODE_SIGN_ENTITLEMENTS"
DEVELOPMENT_TEAM = "DEVELOPMENT_TEAM"
INFOPLIST_FILE = "INFOPLIST_FILE"
PRODUCT_BUNDLE_IDENTIFIER = "PRODUCT_BUNDLE_IDENTIFIER"


class TargetKind(str, Enum):
    """Product kinds a build target can have."""

    APPLICATION = "application"
    FRAMEWORK = "framework"
    APP_EXTENSION = "app-extension"
    WATCH_EXTENSION = "watch-extension"
    UNIT_TEST = "unit-test"
    UI_TEST = "ui-test"

    @property
    def is_extension(self) -> bool:
        return self in (TargetKind.APP_EXTENSION, TargetKind.WATCH_EXTENSION)

    @property
    def is_test(self) -> bool:
        return self in (TargetKind.UNIT_TEST, TargetKind.UI_TEST)


class BuildTarget(BaseModel):
    """A build target with its per-configuration settings.

    `settings` maps configuration name -> {setting name -> value}.
    """

    name: str = Field(..., min_length=1, description="Target name.")
    kind: TargetKind = Field(
        default=TargetKind.APPLICATION,
        description="Product kind; decides application/extension/test lookups.",
    )
    settings: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Build settings per configuration.",
    )


class ProjectDocument(BaseModel):
    """On-disk representation of a project (JSON).

    Why a separate document:
    - The project file is a storage format; the runtime model wraps it and adds
      behavior (setting resolution, file registration).
    """

    configurations: list[str] = Field(
        default_factory=lambda: ["Debug", "Release"],
        description="Build configuration names.",
    )
    settings: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Project-level settings per configuration (target values win).",
    )
    targets: list[BuildTarget] = Field(default_factory=list)
    files: list[str] = Field(
        default_factory=list,
        description="Files registered as project members (relative to the project dir).",
    )


class BranchKeys(BaseModel):
    live: str | None = Field(default=None, description="Live Branch key.")
    test: str | None = Field(default=None, description="Test Branch key.")

    def supplied(self) -> dict[str, str]:
        return {kind: value for kind, value in (("live", self.live), ("test", self.test)) if value}


class AppLinkDetail(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    app_id: Any = Field(
        default=None,
        alias="appID",
        description="Application identifier, `<team>.<bundle>`.",
    )


class ValidationResult(BaseModel):
    """Outcome of a validation call.

    Diagnostics keep the order in which they were recorded; callers merge
    results with `extend` instead of sharing mutable state.
    """

    valid: bool = Field(default=True)
    diagnostics: list[str] = Field(default_factory=list)

    @classmethod
    def failure(cls, *diagnostics: str) -> "ValidationResult":
        return cls(valid=False, diagnostics=list(diagnostics))

    def extend(self, other: "ValidationResult") -> None:
        self.valid = self.valid and other.valid
        self.diagnostics.extend(other.diagnostics)


class FetchResult(BaseModel):
    """Raw manifest bytes, or None with the reason in `diagnostics`."""

    domain: str
    data: bytes | None = None
    diagnostics: list[str] = Field(default_factory=list)


class IdentifierLookup(BaseModel):
    """App identifiers published for a domain, or None with diagnostics."""

    domain: str
    identifiers: list[str] | None = None
    diagnostics: list[str] = Field(default_factory=list)
