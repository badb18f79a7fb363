"""Domain models (Pydantic v2).

Why Pydantic here:
- The command surface is typed end to end: keys, port records and registry
  rows are validated once at the edge and then trusted.
- `model_dump(mode="json")` gives the exact shape the web-view front-end reads.

Note:
- These models describe *what* flows through the bridge, not *how* it is
  obtained (shell, `ss`, filesystem live in `adapters`).
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class ProjectVerbKey(BaseModel):
    """`<project>.<verb>`: run one O2 verb against one project."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["project_verb"] = "project_verb"
    project: str = Field(
        ...,
        min_length=1,
        description="Safe project token ([a-z0-9_-]+).",
    )
    verb: str = Field(
        ...,
        min_length=1,
        description="Safe verb token; checked against the verb table at dispatch.",
    )


class PortStatusKey(BaseModel):
    """`port_status.<port>`: delegate a port report to O2."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["port_status"] = "port_status"
    port: str = Field(
        ...,
        min_length=1,
        description="ASCII digit string, passed to the script verbatim.",
    )


CommandKey = Annotated[Union[ProjectVerbKey, PortStatusKey], Field(discriminator="kind")]


class PortStatus(BaseModel):
    """Result of probing one TCP port.

    Invariants:
    - Not listening means no `pid` and no `cmd`.
    - `err` only when the probe itself failed; an idle port is a clean result.
    """

    port: int = Field(..., ge=1, le=65535, description="TCP port probed.")
    listening: bool = Field(default=False, description="Something is bound in LISTEN state.")
    pid: int | None = Field(
        default=None,
        ge=0,
        le=2**32 - 1,
        description="Owner pid reported by `ss` (needs permission to see it).",
    )
    cmd: str | None = Field(default=None, description="Owner process name reported by `ss`.")
    err: str | None = Field(default=None, description="Probe failure message, if any.")

    @model_validator(mode="after")
    def _idle_has_no_owner(self) -> "PortStatus":
        if not self.listening and (self.pid is not None or self.cmd is not None):
            raise ValueError("pid/cmd are only meaningful when listening")
        return self


class ProjectEntry(BaseModel):
    """One element of `projects.json`.

    Only `key` is required; every other field is carried through untouched.
    """

    model_config = ConfigDict(extra="allow")

    key: str = Field(..., min_length=1, description="Project slug (e.g. 'tbis').")


class ProjectRow(BaseModel):
    """Normalized view of a registry entry, as the projects table shows it."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    repo_hint: str | None = Field(default=None, alias="repoHint")
    port: int | None = Field(default=None, ge=1, le=65535)
    url: str | None = None

    o2_start_key: str | None = Field(default=None, alias="o2StartKey")
    o2_snapshot_key: str | None = Field(default=None, alias="o2SnapshotKey")
    o2_commit_key: str | None = Field(default=None, alias="o2CommitKey")
    o2_map_key: str | None = Field(default=None, alias="o2MapKey")
    o2_proof_pack_key: str | None = Field(default=None, alias="o2ProofPackKey")

    def o2_keys(self) -> dict[str, str]:
        """O2 hook keys that are set, by registry field name."""

        data = self.model_dump(by_alias=True, include={
            "o2_start_key",
            "o2_snapshot_key",
            "o2_commit_key",
            "o2_map_key",
            "o2_proof_pack_key",
        })
        return {name: value for name, value in data.items() if value}


class BridgeResponse(BaseModel):
    """One reply on the host bridge: a value or a single error message."""

    id: Any = None
    ok: bool
    value: Any = None
    error: str | None = None
    kind: str | None = None
