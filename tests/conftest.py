"""Shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.domain.errors import RadControlError


class FakeRunner:
    """Records command lines instead of spawning a shell."""

    def __init__(self, output: str = "", error: RadControlError | None = None) -> None:
        self.output = output
        self.error = error
        self.commands: list[str] = []
        self.spawned: list[str] = []

    def run_output(self, cmd_text: str) -> str:
        self.commands.append(cmd_text)
        if self.error is not None:
            raise self.error
        return self.output

    def spawn(self, cmd_text: str) -> str:
        self.spawned.append(cmd_text)
        return "spawned"


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def home(tmp_path, monkeypatch) -> Path:
    """Isolated $HOME with no O2_ROOT override."""

    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("O2_ROOT", raising=False)
    return tmp_path


@pytest.fixture
def write_registry(home):
    def _write(payload, raw: str | None = None) -> Path:
        path = home / "dev" / "o2" / "registry" / "projects.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(raw if raw is not None else json.dumps(payload), encoding="utf-8")
        return path

    return _write


VERB_SCRIPTS_EXPECTED = {
    "dev": "o2_dev.sh",
    "dev_strict": "o2_dev_strict.sh",
    "snapshot": "o2_snapshot.sh",
    "commit": "o2_commit.sh",
    "map": "o2_map.sh",
    "proofpack": "o2_proofpack.sh",
    "truth_map": "o2_truth_map.sh",
}
