"""Key grammar: `<project>.<verb>` or `port_status.<port>`.

Parsing is total: any string yields a `CommandKey` or raises `BadKeyShape` /
`UnsafeToken`. Verb membership is not checked here; see `verbs.script_for`.
"""

from __future__ import annotations

from core.domain.errors import BadKeyShape, UnsafeToken
from core.domain.models import CommandKey, PortStatusKey, ProjectVerbKey
from core.domain.tokens import is_port_token, is_safe_token

PORT_STATUS_PREFIX = "port_status"


def parse_key(key: str) -> CommandKey:
    parts = key.split(".")
    if len(parts) != 2:
        raise BadKeyShape(f"Invalid key '{key}' (expected exactly one '.')")

    left = parts[0].strip()
    right = parts[1].strip()

    if left == PORT_STATUS_PREFIX:
        if not is_port_token(right):
            raise UnsafeToken(f"Invalid port token: '{right}'")
        return PortStatusKey(port=right)

    if not is_safe_token(left):
        raise UnsafeToken(f"Unsafe project token: '{left}'")
    if not is_safe_token(right):
        raise UnsafeToken(f"Unsafe verb token: '{right}'")

    return ProjectVerbKey(project=left, verb=right)
