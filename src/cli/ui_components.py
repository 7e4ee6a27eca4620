"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Lets several commands reuse the same tables/panels.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ValidationResult


def configure_logging(console: Console, level: str) -> None:
    """Route stdlib logging through Rich.

    `force=True` replaces handlers installed by a previous command in the same
    process (tests invoke the app repeatedly).
    """

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def print_banner(console: Console) -> None:
    title = Text("applinks-kit", style="bold cyan")
    subtitle = Text("Universal Links • Entitlements • AASA validation", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_changes_table(paths: Iterable[Path]) -> Table:
    table = Table(title="Modified files")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Path", style="magenta")
    for index, path in enumerate(paths, start=1):
        table.add_row(str(index), str(path))
    return table


def build_validation_panel(result: ValidationResult, *, title: str = "Universal Link validation") -> Panel:
    """Panel summarizing a `ValidationResult` and its diagnostics."""

    body = Text()
    if result.valid:
        body.append("All domains passed validation.", style="bold green")
        border = "green"
    else:
        body.append("Validation failed.\n", style="bold red")
        border = "red"
    for diagnostic in result.diagnostics:
        body.append(f"\n- {diagnostic}")

    return Panel(body, title=Text(title, style="bold"), border_style=border)
