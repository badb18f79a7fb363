"""Domain errors (RadControl).

Why a hierarchy:
- Every command on the bridge fails with exactly one human-readable message.
- `kind` gives the UI (and tests) a stable name without parsing text.
"""

from __future__ import annotations


class RadControlError(Exception):
    """Base error for every failure the command surface can report."""

    kind: str = "RadControlError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class BadKeyShape(RadControlError):
    kind = "BadKeyShape"


class UnsafeToken(RadControlError):
    kind = "UnsafeToken"


class UnknownVerb(RadControlError):
    kind = "UnknownVerb"


class SpawnFailed(RadControlError):
    kind = "SpawnFailed"


class NonZeroExit(RadControlError):
    """The child ran but exited with a non-zero status.

    `exit_code` is -1 when the OS did not report one (killed by a signal).
    """

    kind = "NonZeroExit"

    def __init__(self, exit_code: int, output: str) -> None:
        super().__init__(f"Command failed (exit {exit_code}):\n{output}")
        self.exit_code = exit_code
        self.output = output


class MissingEnv(RadControlError):
    kind = "MissingEnv"


class MissingFile(RadControlError):
    kind = "MissingFile"


class BadRegistry(RadControlError):
    kind = "BadRegistry"


class BadRequest(RadControlError):
    """Bridge request that is not a JSON object or lacks a required argument."""

    kind = "BadRequest"


class UnknownCommand(RadControlError):
    kind = "UnknownCommand"
