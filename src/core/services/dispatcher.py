"""O2 dispatcher: untrusted key in, one fixed script invocation out.

The UI sends a key such as `tbis.snapshot`; this module turns it into exactly
one `bash "scripts/<script>" "<token>"` run from the O2 root. Both tokens have
passed `core.domain.tokens` before they are interpolated, so the only shell
text that varies is drawn from `[a-z0-9_-]` or `[0-9]`.
"""

from __future__ import annotations

import logging
import os

from adapters.shell_runner import BashShellRunner
from core.config import HOME_ENV, O2_ROOT_ENV
from core.domain.errors import MissingEnv
from core.domain.keys import parse_key
from core.domain.models import CommandKey, PortStatusKey, ProjectVerbKey
from core.domain.verbs import PORT_STATUS_SCRIPT, script_for
from core.interfaces.shell import ShellRunner

logger = logging.getLogger(__name__)

_SCRIPT_TEMPLATE = """
set -euo pipefail
O2_ROOT="${{O2_ROOT:-$HOME/dev/o2}}"
cd "${{O2_ROOT}}"
bash "scripts/{script}" "{arg}"
"""


def resolve_invocation(key: CommandKey) -> tuple[str, str]:
    """(script filename, positional argument) for a parsed key."""

    if isinstance(key, PortStatusKey):
        return PORT_STATUS_SCRIPT, key.port
    if isinstance(key, ProjectVerbKey):
        return script_for(key.verb), key.project
    raise TypeError(f"unsupported key: {key!r}")


def build_script(key: CommandKey) -> str:
    script, arg = resolve_invocation(key)
    return _SCRIPT_TEMPLATE.format(script=script, arg=arg)


def _require_root_env() -> None:
    # Read per call: the O2 root is never cached.
    if os.environ.get(O2_ROOT_ENV) or os.environ.get(HOME_ENV):
        return
    raise MissingEnv(f"{HOME_ENV} not set (needed to resolve the O2 root; set {O2_ROOT_ENV} to override)")


def run_o2(key_text: str, runner: ShellRunner | None = None) -> str:
    """Parse `key_text`, build the O2 invocation and run it to completion."""

    key = parse_key(key_text)
    cmd = build_script(key)
    _require_root_env()

    runner = runner or BashShellRunner()

    logger.debug("dispatch %s -> %s", key_text.strip(), resolve_invocation(key))
    return runner.run_output(cmd)
