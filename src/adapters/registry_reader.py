"""O2 project registry (`$HOME/dev/o2/registry/projects.json`).

The file is the only source of truth for the project list; this module reads
it and never writes it. `list_projects` hands the array back untouched
(re-serialized), `registry_to_projects` is the normalized view for tables.
"""

from __future__ import annotations

import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from core.config import HOME_ENV
from core.domain.errors import BadRegistry, MissingEnv, MissingFile
from core.domain.models import ProjectRow

logger = logging.getLogger(__name__)

REGISTRY_RELATIVE = Path("dev") / "o2" / "registry" / "projects.json"

_ROW_STRING_FIELDS = (
    "repoHint",
    "url",
    "o2StartKey",
    "o2SnapshotKey",
    "o2CommitKey",
    "o2MapKey",
    "o2ProofPackKey",
)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON; the web-view cannot parse them back.
    raise ValueError(f"non-standard JSON constant '{name}'")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text}")
    return value


def registry_path() -> Path:
    home = os.environ.get(HOME_ENV)
    if not home:
        raise MissingEnv(f"{HOME_ENV} not set")
    return Path(home) / REGISTRY_RELATIVE


def load_registry(path: Path | None = None) -> list[Any]:
    """Read and validate the registry; returns the JSON array as-is."""

    path = path or registry_path()
    if not path.is_file():
        raise MissingFile(f"O2 registry missing: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BadRegistry(f"Failed to read {path}: {exc}") from exc

    try:
        data = json.loads(raw, parse_constant=_reject_constant, parse_float=_parse_float)
    except (ValueError, RecursionError) as exc:
        raise BadRegistry(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, list):
        raise BadRegistry(f"Registry at {path} is not a JSON array")
    return data


def dump_registry(entries: list[Any]) -> str:
    """Pretty JSON: 2-space indent, key order kept, non-ASCII kept."""

    return json.dumps(entries, ensure_ascii=False, indent=2, allow_nan=False)


def list_projects() -> str:
    path = registry_path()
    entries = load_registry(path)
    try:
        text = dump_registry(entries)
    except (ValueError, RecursionError) as exc:
        raise BadRegistry(f"Failed to serialize registry {path}: {exc}") from exc
    logger.info("[registry] loaded O2: %d entries (%s)", len(entries), path)
    return text


def _row_from_entry(entry: Any) -> ProjectRow | None:
    if not isinstance(entry, dict):
        return None
    key = entry.get("key")
    if not isinstance(key, str) or not key:
        return None

    label = entry.get("label")
    data: dict[str, Any] = {
        "key": key,
        "label": label if isinstance(label, str) and label else key,
    }
    for name in _ROW_STRING_FIELDS:
        value = entry.get(name)
        if isinstance(value, str):
            data[name] = value

    port = entry.get("port")
    if isinstance(port, int) and not isinstance(port, bool) and 1 <= port <= 65535:
        data["port"] = port

    try:
        return ProjectRow.model_validate(data)
    except ValidationError:
        return None


def registry_to_projects(entries: Iterable[Any]) -> list[ProjectRow]:
    """Rows for every entry with a usable `key`, sorted by label.

    The UI must not invent rows: anything without a non-empty string `key`
    is dropped, and wrong-typed optional fields are ignored.
    """

    rows = [row for row in (_row_from_entry(e) for e in entries) if row is not None]
    rows.sort(key=lambda r: r.label.casefold())
    return rows


def next_port_suggestion(used_ports: Iterable[int]) -> int | None:
    """First free port in 3010-3099, then 3000-3999."""

    used = set(used_ports)
    for port in range(3010, 3100):
        if port not in used:
            return port
    for port in range(3000, 4000):
        if port not in used:
            return port
    return None
