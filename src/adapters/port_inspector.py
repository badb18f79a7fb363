"""Port inspector: `ss` to probe, `fuser` to free.

Typical `ss -ltnpH` line:

    LISTEN 0 511 0.0.0.0:3000 0.0.0.0:* users:(("node",pid=12345,fd=20))

Only the owner pid and the first quoted process name are extracted; the rest
of the line is ignored.
"""

from __future__ import annotations

import logging

from adapters.shell_runner import BashShellRunner
from core.domain.errors import RadControlError
from core.domain.models import PortStatus
from core.domain.tokens import coerce_port
from core.interfaces.shell import ShellRunner

logger = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1


def probe_command(port: int) -> str:
    return f"ss -ltnpH 'sport = :{port}' 2>/dev/null || true"


def kill_command(port: int) -> str:
    return f"fuser -k {port}/tcp || true"


def parse_pid(text: str) -> int | None:
    """Leading digit run right after the first `pid=`."""

    idx = text.find("pid=")
    if idx < 0:
        return None

    digits = []
    for ch in text[idx + len("pid="):]:
        if not ("0" <= ch <= "9"):
            break
        digits.append(ch)
    if not digits:
        return None

    pid = int("".join(digits))
    if pid > _U32_MAX:
        return None
    return pid


def parse_cmd(text: str) -> str | None:
    """Content of the first double-quoted run after `((`."""

    idx = text.find("((")
    if idx < 0:
        return None

    rest = text[idx + 2:]
    start = rest.find('"')
    if start < 0:
        return None
    end = rest.find('"', start + 1)
    if end < 0:
        return None

    name = rest[start + 1:end].strip()
    return name or None


def parse_ss_output(port: int, output: str) -> PortStatus:
    listening = any(line.strip() for line in output.splitlines())
    if not listening:
        return PortStatus(port=port, listening=False)
    return PortStatus(
        port=port,
        listening=True,
        pid=parse_pid(output),
        cmd=parse_cmd(output),
    )


def port_status(port: int, runner: ShellRunner | None = None) -> PortStatus:
    """Probe `port`. Always returns a record; probe failures land in `err`."""

    port = coerce_port(port)
    runner = runner or BashShellRunner()
    try:
        output = runner.run_output(probe_command(port))
    except RadControlError as exc:
        logger.debug("port probe failed for %s: %s", port, exc)
        return PortStatus(port=port, listening=False, err=exc.message)

    status = parse_ss_output(port, output)
    logger.debug("port %s listening=%s pid=%s cmd=%s", port, status.listening, status.pid, status.cmd)
    return status


def kill_port(port: int, runner: ShellRunner | None = None) -> str:
    """Best effort: `|| true` keeps an idle port from being an error."""

    port = coerce_port(port)
    runner = runner or BashShellRunner()
    return runner.run_output(kill_command(port))
