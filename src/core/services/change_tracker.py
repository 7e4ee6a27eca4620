"""Record of files mutated during a run (reporting only)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator


class ChangeTracker:
    def __init__(self) -> None:
        self._paths: list[Path] = []

    def add(self, path: Path | str) -> None:
        absolute = Path(path).expanduser().resolve()
        if absolute not in self._paths:
            self._paths.append(absolute)

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)
