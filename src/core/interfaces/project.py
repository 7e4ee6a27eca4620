"""Project model contracts.

Why Protocol:
- The core only needs a handful of operations on a project (find targets,
  read resolved settings, write settings, register files).
- Any backing store (JSON document, a real Xcode project wrapper, a test
  double) can satisfy it without inheritance.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class ProjectTarget(Protocol):
    """A build target as seen by the core."""

    @property
    def name(self) -> str: ...

    @property
    def is_extension_kind(self) -> bool: ...

    @property
    def is_test_kind(self) -> bool: ...

    def resolved_setting(self, name: str) -> dict[str, str | None]:
        """Raw value of `name` per configuration, without macro expansion."""

        ...

    def set_setting(self, name: str, value: str) -> None:
        """Set `name` to `value` in every configuration of the target."""

        ...


@runtime_checkable
class ProjectModel(Protocol):
    """A project: its storage path, targets and file registry."""

    @property
    def path(self) -> Path: ...

    @property
    def targets(self) -> Sequence[ProjectTarget]: ...

    def register_file(self, relative_path: str) -> None: ...

    def save(self) -> None: ...
