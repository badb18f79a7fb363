"""RadControl CLI (Typer + Rich).

Every subcommand is a thin shell over `core.services.bridge.HostBridge`, so
the terminal and the web-view host see the same commands, the same
arguments and the same error messages.
"""

from __future__ import annotations

import json
import logging
import sys

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from adapters.registry_reader import load_registry, next_port_suggestion, registry_path, registry_to_projects
from adapters.shell_runner import BashShellRunner
from adapters.single_instance import SingleInstance
from adapters.stdio_bridge import StdioBridge
from cli import doctor
from cli.ui_components import build_port_panel, build_projects_table, print_banner
from core.config import AppSettings
from core.domain.errors import RadControlError
from core.domain.models import PortStatus
from core.services.bridge import KILL_PORT, LIST_PROJECTS, PORT_STATUS, RUN_O2, HostBridge

app = typer.Typer(
    no_args_is_help=True,
    help="RadControl backend: O2 verbs, port tools and the project registry.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False, markup=False)],
        force=True,
    )


def _bridge(settings: AppSettings | None = None) -> HostBridge:
    return HostBridge(runner=BashShellRunner(settings or AppSettings()))


def _call(name: str, args: dict | None = None):
    """Run a bridge command; failures print their message and exit 1."""

    try:
        return _bridge().call(name, args)
    except RadControlError as exc:
        _err_console.print(Text(exc.message, style="red"))
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    settings = AppSettings()
    _configure_logging("DEBUG" if verbose else settings.log_level)


@app.command(name="run")
def run_key(key: str = typer.Argument(..., help="<project>.<verb> or port_status.<port>")) -> None:
    """Dispatch one O2 verb (e.g. `tbis.snapshot`)."""

    output = _call(RUN_O2, {"key": key})
    typer.echo(output, nl=not output.endswith("\n"))


@app.command()
def projects(
    as_json: bool = typer.Option(False, "--json", help="Raw registry JSON, exactly as the UI receives it."),
    suggest_port: bool = typer.Option(False, "--suggest-port", help="Suggest a free dev port for a new project."),
) -> None:
    """List the projects in the O2 registry."""

    if as_json:
        typer.echo(_call(LIST_PROJECTS))
        return

    try:
        rows = registry_to_projects(load_registry(registry_path()))
    except RadControlError as exc:
        _err_console.print(Text(exc.message, style="red"))
        raise typer.Exit(code=1) from exc

    if suggest_port:
        port = next_port_suggestion(row.port for row in rows if row.port is not None)
        typer.echo(str(port) if port is not None else "no free port in 3000-3999")
        return

    print_banner(_console)
    _console.print(build_projects_table(rows))


@app.command(name="port-status")
def port_status_cmd(
    port: int = typer.Argument(..., min=1, max=65535),
    as_json: bool = typer.Option(False, "--json", help="Print the record as JSON."),
) -> None:
    """Show what is listening on a TCP port."""

    record = _call(PORT_STATUS, {"port": port})
    if as_json:
        typer.echo(json.dumps(record))
        return
    _console.print(build_port_panel(PortStatus.model_validate(record)))


@app.command(name="kill-port")
def kill_port_cmd(port: int = typer.Argument(..., min=1, max=65535)) -> None:
    """Kill whatever holds a TCP port (no-op when the port is free)."""

    output = _call(KILL_PORT, {"port": port})
    if output.strip():
        typer.echo(output.rstrip("\n"))
    else:
        typer.echo(f"port {port}: nothing to kill")


@app.command()
def invoke(
    name: str = typer.Argument(..., help="Bridge command name (run_o2, o2_list_projects, port_status, kill_port)."),
    args: str = typer.Option("{}", "--args", help="JSON object of arguments."),
) -> None:
    """Call a bridge command and print the JSON response."""

    try:
        parsed = json.loads(args)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--args is not valid JSON: {exc}") from exc

    response = _bridge().invoke(name, parsed)
    typer.echo(json.dumps(response.model_dump(mode="json"), ensure_ascii=False))
    if not response.ok:
        raise typer.Exit(code=1)


@app.command()
def bridge() -> None:
    """Serve the host bridge over stdin/stdout (one JSON request per line)."""

    settings = AppSettings()
    stdio = StdioBridge(_bridge(settings), sys.stdin, sys.stdout, workers=settings.bridge_workers)
    guard = SingleInstance(settings.resolved_lock_path(), on_focus=lambda: stdio.send_event("focus"))

    if not guard.acquire():
        if guard.notify_existing():
            _err_console.print(f"RadControl already running (pid {guard.existing_pid}); focused it.")
        else:
            _err_console.print("RadControl already running.")
        raise typer.Exit(code=0)

    try:
        stdio.serve()
    finally:
        guard.release()


def run() -> None:
    app()
