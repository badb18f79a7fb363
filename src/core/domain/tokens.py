"""Token validators.

These predicates are the only gate between UI input and shell
interpolation. A token accepted here cannot close a double-quoted shell word
or introduce a metacharacter; widening either class breaks that guarantee.
"""

from __future__ import annotations

from core.domain.errors import UnsafeToken

_SAFE_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789_-")
_DIGITS = frozenset("0123456789")

MIN_PORT = 1
MAX_PORT = 65535


def is_safe_token(value: str) -> bool:
    """True iff `value` is non-empty and only uses `[a-z0-9_-]`."""

    return bool(value) and all(ch in _SAFE_CHARS for ch in value)


def is_port_token(value: str) -> bool:
    """True iff `value` is non-empty and only uses ASCII digits."""

    # str.isdigit() accepts non-ASCII digits (e.g. '٣'), hence the explicit set.
    return bool(value) and all(ch in _DIGITS for ch in value)


def coerce_port(value: object) -> int:
    """Accept an int or a port token and return it as a TCP port number.

    Raises `UnsafeToken` for anything else, including 0 and values > 65535.
    """

    if isinstance(value, bool):
        raise UnsafeToken(f"Invalid port: '{value}'")
    if isinstance(value, int):
        port = value
    elif isinstance(value, str) and is_port_token(value.strip()):
        port = int(value.strip())
    else:
        raise UnsafeToken(f"Invalid port: '{value}'")

    if not MIN_PORT <= port <= MAX_PORT:
        raise UnsafeToken(f"Invalid port: '{value}'")
    return port
