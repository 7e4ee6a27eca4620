"""Error taxonomy.

Only `ConfigurationError` aborts a run. The others are raised inside the
manifest pipeline and turned into diagnostics by their callers.
"""

from __future__ import annotations


class ApplinksError(Exception):
    """Base class for every error raised by the project."""


class ConfigurationError(ApplinksError):
    """The project or one of its files cannot be used as configured."""


class TransportError(ApplinksError):
    """The AASA file could not be requested at the socket level."""


class TrustError(ApplinksError):
    """A signed AASA payload failed verification."""


class ManifestFormatError(ApplinksError):
    """The AASA file is not valid JSON or lacks expected fields."""
