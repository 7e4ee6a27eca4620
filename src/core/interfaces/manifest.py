"""AASA source contract.

Rules:
- `fetch` is synchronous: domains are checked one after another.
- It never raises for network or trust failures; those come back as
  diagnostics on the result.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import FetchResult


@runtime_checkable
class ManifestSource(Protocol):
    def fetch(self, domain: str) -> FetchResult:
        """Return the AASA bytes for `domain`, or None with diagnostics."""

        ...
