"""CLI UI components (Rich).

Why separate components:
- Keeps command handlers free of layout details.
- Lets `projects`, `port-status` and `doctor` share the same look.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import PortStatus, ProjectRow


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Only interactive commands call this; `bridge`, `invoke` and `--json`
    output must stay machine-readable.
    """

    title = Text("RadControl", style="bold cyan")
    subtitle = Text("O2 verbs • Ports • Project registry", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_projects_table(rows: list[ProjectRow]) -> Table:
    table = Table(title="O2 Projects")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Label", style="white")
    table.add_column("Port", style="green", justify="right")
    table.add_column("URL", style="magenta")
    table.add_column("O2 hooks", style="dim")

    for row in rows:
        table.add_row(
            row.key,
            row.label,
            str(row.port) if row.port is not None else "-",
            row.url or "-",
            ", ".join(row.o2_keys().values()) or "-",
        )
    return table


def build_port_panel(status: PortStatus) -> Panel:
    """Panel for one `PortStatus` record."""

    body = Text()
    if status.err:
        body.append("probe failed\n", style="bold red")
        body.append(status.err)
        border = "red"
    elif status.listening:
        body.append("LISTENING\n", style="bold green")
        body.append(f"pid: {status.pid if status.pid is not None else '?'}\n")
        body.append(f"cmd: {status.cmd or '?'}")
        border = "green"
    else:
        body.append("free", style="bold")
        border = "dim"

    return Panel(body, title=f"Port {status.port}", border_style=border)
