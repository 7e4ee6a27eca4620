"""Plist load/save for entitlements and Info.plist files.

Absent vs malformed:
- "Not configured" is decided by the caller (the setting resolves to None) and
  never reaches this module.
- A configured file that cannot be read or parsed raises
  `ConfigurationError` before any mutation happens.
"""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from core.domain.errors import ConfigurationError


def read_plist(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            data = plistlib.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"Failed to open {path}: {exc}") from exc
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise ConfigurationError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Failed to parse {path}: top-level object is not a dictionary")
    return data


def write_plist(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as fh:
        plistlib.dump(data, fh, fmt=plistlib.FMT_XML)
    return path
