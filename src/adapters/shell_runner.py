"""Login-shell runner (`bash -lc`).

Why a wrapper:
- One place decides how stdout/stderr are combined and how exits are
  classified, so every command on the bridge fails the same way.
- Services receive a `ShellRunner`; tests substitute a recording fake.
"""

from __future__ import annotations

import logging
import subprocess

from core.config import AppSettings
from core.domain.errors import NonZeroExit, SpawnFailed

logger = logging.getLogger(__name__)

# Exit code reported when the OS gives none (child killed by a signal).
NO_EXIT_CODE = -1


def combine_output(stdout: str, stderr: str) -> str:
    """stdout alone, stderr alone, or both joined by one newline (stdout first)."""

    if not stderr.strip():
        return stdout
    if not stdout.strip():
        return stderr
    return f"{stdout}\n{stderr}"


def _exit_code(returncode: int | None) -> int:
    if returncode is None or returncode < 0:
        return NO_EXIT_CODE
    return returncode


class BashShellRunner:
    """`ShellRunner` backed by `subprocess` and a login shell."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    def _argv(self, cmd_text: str) -> list[str]:
        return [self._settings.shell, "-lc", cmd_text]

    def run_output(self, cmd_text: str) -> str:
        logger.debug("run: %s -lc %r", self._settings.shell, cmd_text)
        try:
            completed = subprocess.run(
                self._argv(cmd_text),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise SpawnFailed(f"Failed to spawn shell: {exc}") from exc

        stdout = completed.stdout.decode("utf-8", errors="replace")
        stderr = completed.stderr.decode("utf-8", errors="replace")
        combined = combine_output(stdout, stderr)

        if completed.returncode == 0:
            return combined
        raise NonZeroExit(_exit_code(completed.returncode), combined)

    def spawn(self, cmd_text: str) -> str:
        """Start the child fully detached and return without waiting."""

        logger.debug("spawn: %s -lc %r", self._settings.shell, cmd_text)
        try:
            proc = subprocess.Popen(
                self._argv(cmd_text),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise SpawnFailed(f"Failed to spawn shell: {exc}") from exc
        return f"Spawned detached shell (pid {proc.pid})"


def run_shell_output(cmd_text: str, settings: AppSettings | None = None) -> str:
    return BashShellRunner(settings).run_output(cmd_text)


def spawn_shell(cmd_text: str, settings: AppSettings | None = None) -> str:
    return BashShellRunner(settings).spawn(cmd_text)
