"""Doctor command for environment diagnostics."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.registry_reader import load_registry, registry_path, registry_to_projects
from cli.ui_components import print_banner
from core.config import HOME_ENV, O2_ROOT_ENV, AppSettings
from core.domain.errors import RadControlError
from core.domain.verbs import all_scripts

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics for O2 and the port tools.")

_console = Console()


def resolve_o2_root() -> Path | None:
    """Same resolution the dispatcher's shell preamble performs."""

    override = os.environ.get(O2_ROOT_ENV)
    if override:
        return Path(override)
    home = os.environ.get(HOME_ENV)
    if home:
        return Path(home) / "dev" / "o2"
    return None


def collect_checks(settings: AppSettings | None = None) -> list[tuple[str, bool, str]]:
    """(check, ok, details) rows; no side effects besides reading files."""

    settings = settings or AppSettings()
    checks: list[tuple[str, bool, str]] = []

    home = os.environ.get(HOME_ENV)
    checks.append(("HOME", bool(home), home or "not set"))

    root = resolve_o2_root()
    root_ok = root is not None and root.is_dir()
    checks.append(("O2 root", root_ok, str(root) if root else "unresolved"))

    for script in all_scripts():
        if root is None:
            checks.append((f"scripts/{script}", False, "O2 root unresolved"))
            continue
        path = root / "scripts" / script
        checks.append((f"scripts/{script}", path.is_file(), str(path)))

    try:
        entries = load_registry(registry_path())
    except RadControlError as exc:
        checks.append(("Registry", False, exc.message))
    else:
        rows = registry_to_projects(entries)
        checks.append(("Registry", True, f"{len(entries)} entries, {len(rows)} with a key"))

    for tool in (settings.shell, "ss", "fuser"):
        found = shutil.which(tool)
        checks.append((f"{tool} on PATH", found is not None, found or "missing"))

    return checks


@app.command()
def run() -> None:
    """Run baseline diagnostics."""

    print_banner(_console)

    table = Table(title="RadControl Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    checks = collect_checks()
    for name, ok, details in checks:
        table.add_row(name, "OK" if ok else "FAIL", details)

    _console.print(table)

    if not all(ok for _, ok, _ in checks):
        _console.print(
            f"\n[yellow]Note:[/yellow] set {O2_ROOT_ENV} if O2 does not live in ~/dev/o2."
        )
