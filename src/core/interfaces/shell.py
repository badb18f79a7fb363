"""Shell runner contract.

Why Protocol:
- Structural contract (duck typing), no inheritance required.
- The dispatcher and the port inspector never touch `subprocess` directly,
  so their command lines can be asserted without spawning anything.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ShellRunner(Protocol):
    """Minimal contract for running login-shell command lines.

    Rules:
    - `run_output` blocks until the child exits and returns the combined
      output, raising `NonZeroExit` / `SpawnFailed` on failure.
    - `spawn` detaches the child and returns immediately.
    """

    def run_output(self, cmd_text: str) -> str:
        ...

    def spawn(self, cmd_text: str) -> str:
        ...
