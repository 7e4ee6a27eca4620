"""Doctor command for environment diagnostics."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.manifest_fetcher import TrustManifestFetcher
from core.config import AppSettings, get_user_env_file
from core.domain.errors import ManifestFormatError
from core.services.domain_validator import parse_identifiers

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_domain(settings: AppSettings, domain: str) -> tuple[bool, str]:
    fetched = TrustManifestFetcher(settings).fetch(domain)
    if fetched.data is None:
        return False, "; ".join(fetched.diagnostics)
    try:
        identifiers = parse_identifiers(fetched.data)
    except ManifestFormatError as exc:
        return False, str(exc)
    return True, ", ".join(identifiers)


@app.command()
def run(
    domain: Optional[str] = typer.Option(None, "--domain", "-d", help="Domain whose AASA file to fetch."),
) -> None:
    """Show the effective configuration and, optionally, check one domain."""

    settings = AppSettings()

    table = Table(title="applinks-kit Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("Configuration", "OK", settings.default_configuration)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Short-link suffix", "OK", settings.short_link_suffix)

    ok = True
    if domain:
        ok, detail = _check_domain(settings, domain)
        table.add_row(f"AASA {domain}", "OK" if ok else "FAIL", detail)

    _console.print(table)
    if not ok:
        raise typer.Exit(code=1)
