"""Closed verb table: verb -> O2 script.

Adding a verb takes three coordinated changes: this table, the script under
`$O2_ROOT/scripts/`, and a test case for it.
"""

from __future__ import annotations

from enum import Enum

from core.domain.errors import UnknownVerb


class Verb(str, Enum):
    """Project-level operations wired to O2."""

    DEV = "dev"
    DEV_STRICT = "dev_strict"
    SNAPSHOT = "snapshot"
    COMMIT = "commit"
    MAP = "map"
    PROOFPACK = "proofpack"
    TRUTH_MAP = "truth_map"

    @property
    def script(self) -> str:
        return VERB_SCRIPTS[self]


VERB_SCRIPTS: dict[Verb, str] = {
    Verb.DEV: "o2_dev.sh",
    Verb.DEV_STRICT: "o2_dev_strict.sh",
    Verb.SNAPSHOT: "o2_snapshot.sh",
    Verb.COMMIT: "o2_commit.sh",
    Verb.MAP: "o2_map.sh",
    Verb.PROOFPACK: "o2_proofpack.sh",
    Verb.TRUTH_MAP: "o2_truth_map.sh",
}

PORT_STATUS_SCRIPT = "o2_port_status_verb.sh"


def script_for(verb: str) -> str:
    """Return the script filename wired to `verb` or raise `UnknownVerb`."""

    try:
        return Verb(verb).script
    except ValueError:
        raise UnknownVerb(f"Unknown verb '{verb}' (not wired in O2 verb map)") from None


def all_scripts() -> list[str]:
    """Every script name the dispatcher may invoke."""

    return [*VERB_SCRIPTS.values(), PORT_STATUS_SCRIPT]
