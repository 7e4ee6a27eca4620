"""applinks-kit CLI.

Commands:
- `setup`: add Universal Link domains (and optionally Branch keys) to a project.
- `validate`: check the project's identity against each domain's AASA file.
- `doctor`: environment diagnostics.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.manifest_fetcher import TrustManifestFetcher
from adapters.project_store import JsonProject
from cli import doctor
from cli.ui_components import (
    build_changes_table,
    build_validation_panel,
    configure_logging,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import ConfigurationError
from core.domain.models import BranchKeys, ValidationResult
from core.interfaces.manifest import ManifestSource
from core.services.change_tracker import ChangeTracker
from core.services.domain_validator import DomainValidator
from core.services.entitlements import EntitlementsManager
from core.services.info_plist import InfoPlistUpdater

app = typer.Typer(
    name="applinks-kit",
    no_args_is_help=True,
    add_completion=False,
    help="Configure and validate Universal Link domains for iOS projects.",
)
app.add_typer(doctor.app, name="doctor")

console = Console()


def build_manifest_source(settings: AppSettings) -> ManifestSource:
    return TrustManifestFetcher(settings)


def _load_project(path: Path) -> JsonProject:
    try:
        return JsonProject.load(path)
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _fail_on(result: ValidationResult) -> None:
    console.print(build_validation_panel(result))
    if not result.valid:
        raise typer.Exit(code=1)


@app.callback()
def main(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Skip the banner."),
) -> None:
    settings = AppSettings()
    configure_logging(console, settings.log_level)
    if not quiet:
        print_banner(console)


@app.command()
def setup(
    project_path: Path = typer.Option(..., "--project", "-p", help="Project document (JSON)."),
    domains: list[str] = typer.Option(..., "--domain", "-d", help="Universal Link domain (repeatable)."),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Target name (default: first app target)."),
    configuration: Optional[str] = typer.Option(None, "--configuration", "-c", help="Build configuration."),
    live_key: Optional[str] = typer.Option(None, "--live-key", help="Branch live key."),
    test_key: Optional[str] = typer.Option(None, "--test-key", help="Branch test key."),
    remove_existing: bool = typer.Option(False, "--remove-existing", help="Replace the domains already in the project."),
    update_ids: bool = typer.Option(
        False,
        "--update-bundle-and-team-ids",
        help="Take team and bundle identifier from the first domain's AASA file.",
    ),
    validate: bool = typer.Option(True, "--validate/--no-validate", help="Validate domains before changing anything."),
    force: bool = typer.Option(False, "--force", help="Apply changes even if validation fails."),
) -> None:
    """Add Universal Link domains to the project's entitlements and Info.plist."""

    settings = AppSettings()
    configuration = configuration or settings.default_configuration
    project = _load_project(project_path)
    changes = ChangeTracker()
    validator = DomainValidator(project, build_manifest_source(settings), changes)

    try:
        if update_ids:
            validator.adopt_identity_from_manifest(target, domains[0])
        elif validate:
            result = validator.validate_all(target, domains, remove_existing, configuration)
            console.print(build_validation_panel(result))
            if not result.valid and not force:
                console.print("[red]Universal Link configuration failed validation.[/red]")
                raise typer.Exit(code=1)

        info_plist = InfoPlistUpdater(project, changes, short_link_suffix=settings.short_link_suffix)
        keys = BranchKeys(live=live_key, test=test_key)
        # Nothing is written unless the Info.plist can be updated too.
        info_plist.check_writable(target, domains, keys, configuration)

        EntitlementsManager(project, changes).add_domains(target, domains, remove_existing, configuration)

        if keys.supplied():
            info_plist.set_branch_keys(target, keys, configuration)
        info_plist.set_universal_link_domains(target, domains, configuration)

        project.save()
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(build_changes_table(changes))


@app.command(name="validate")
def validate_command(
    project_path: Path = typer.Option(..., "--project", "-p", help="Project document (JSON)."),
    domains: Optional[list[str]] = typer.Option(None, "--domain", "-d", help="Expected domain (repeatable)."),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Target name (default: first app target)."),
    configuration: Optional[str] = typer.Option(None, "--configuration", "-c", help="Build configuration."),
    strict_domains: bool = typer.Option(
        False,
        "--strict-domains",
        help="Require the project's domains to be exactly the --domain values.",
    ),
) -> None:
    """Validate the project's Universal Link domains against their AASA files."""

    settings = AppSettings()
    configuration = configuration or settings.default_configuration
    project = _load_project(project_path)
    validator = DomainValidator(project, build_manifest_source(settings))
    domains = domains or []

    try:
        if strict_domains:
            expected = validator.validate_project_domains(domains, target, configuration)
            if not expected.valid:
                _fail_on(expected)
        result = validator.validate_all(target, domains, False, configuration)
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _fail_on(result)


def run() -> None:
    # UTF-8 output on Windows terminals (✅ in log lines).
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    app()
