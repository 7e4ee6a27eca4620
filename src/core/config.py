"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP, plist) read settings consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "applinks-kit"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "applinks-kit"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "applinks-kit"
    return Path.home() / ".config" / "applinks-kit"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated values at the edge (env vars) with no logic in the core.
    - A single configuration contract shared by the CLI and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="APPLINKS_KIT_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per manifest request (seconds).",
    )
    user_agent: str = Field(
        default="applinks-kit/0.1",
        min_length=1,
        description="User-Agent sent when fetching AASA files.",
    )
    default_configuration: str = Field(
        default="Release",
        min_length=1,
        description="Build configuration used when none is given.",
    )
    short_link_suffix: str = Field(
        default="app.link",
        min_length=1,
        description="Suffix of short-link domains that never need Info.plist listing.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for the CLI (DEBUG, INFO, WARNING, ...).",
    )
