"""Host bridge command table."""

import json

import pytest

from conftest import FakeRunner
from core.domain.errors import UnknownCommand
from core.services.bridge import HostBridge


@pytest.fixture
def bridge(fake_runner):
    return HostBridge(runner=fake_runner)


def test_stable_command_names(bridge):
    assert bridge.names() == ["kill_port", "o2_list_projects", "port_status", "run_o2"]


def test_run_o2_success(home):
    runner = FakeRunner(output="snapshot written\n")
    response = HostBridge(runner=runner).invoke("run_o2", {"key": "tbis.snapshot"}, request_id=7)
    assert response.ok is True
    assert response.id == 7
    assert response.value == "snapshot written\n"
    assert runner.commands[0].strip().endswith('bash "scripts/o2_snapshot.sh" "tbis"')


@pytest.mark.parametrize(
    "key, kind, token",
    [
        ("tbis..dev", "BadKeyShape", "tbis..dev"),
        ("TBIS.dev", "UnsafeToken", "TBIS"),
        ("tbis.deploy", "UnknownVerb", "deploy"),
    ],
)
def test_run_o2_errors_are_single_messages(bridge, home, key, kind, token):
    response = bridge.invoke("run_o2", {"key": key})
    assert response.ok is False
    assert response.kind == kind
    assert response.error.count(token) == 1
    assert response.value is None


def test_port_status_returns_record(bridge):
    response = bridge.invoke("port_status", {"port": 3000})
    assert response.ok is True
    assert response.value == {"port": 3000, "listening": False, "pid": None, "cmd": None, "err": None}


def test_port_status_accepts_digit_strings(bridge, fake_runner):
    bridge.invoke("port_status", {"port": "8080"})
    assert fake_runner.commands == ["ss -ltnpH 'sport = :8080' 2>/dev/null || true"]


def test_kill_port(bridge, fake_runner):
    response = bridge.invoke("kill_port", {"port": 3000})
    assert response.ok is True
    assert fake_runner.commands == ["fuser -k 3000/tcp || true"]


def test_list_projects(bridge, write_registry):
    write_registry([{"key": "tbis"}])
    response = bridge.invoke("o2_list_projects")
    assert response.ok is True
    assert json.loads(response.value) == [{"key": "tbis"}]


def test_list_projects_missing(bridge, home):
    response = bridge.invoke("o2_list_projects", {})
    assert response.ok is False
    assert response.kind == "MissingFile"


@pytest.mark.parametrize(
    "name, args, kind",
    [
        ("run_o2", {}, "BadRequest"),
        ("run_o2", {"key": 5}, "BadRequest"),
        ("run_o2", ["tbis.dev"], "BadRequest"),
        ("port_status", {}, "BadRequest"),
        ("port_status", {"port": 0}, "UnsafeToken"),
        ("kill_port", {"port": "3000; reboot"}, "UnsafeToken"),
        ("exec", {"cmd": "ls"}, "UnknownCommand"),
    ],
)
def test_bad_requests(bridge, fake_runner, name, args, kind):
    response = bridge.invoke(name, args)
    assert response.ok is False
    assert response.kind == kind
    assert fake_runner.commands == []


def test_call_raises_instead_of_folding(bridge):
    with pytest.raises(UnknownCommand):
        bridge.call("nope")


def test_unexpected_errors_propagate(bridge):
    def broken(args):
        raise RuntimeError("bug")

    bridge.register("broken", broken)
    with pytest.raises(RuntimeError):
        bridge.invoke("broken")
