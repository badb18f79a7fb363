"""Port inspector: `ss` parsing and `fuser` invocation."""

import pytest

from adapters.port_inspector import (
    kill_command,
    kill_port,
    parse_cmd,
    parse_pid,
    parse_ss_output,
    port_status,
    probe_command,
)
from conftest import FakeRunner
from core.domain.errors import NonZeroExit, SpawnFailed, UnsafeToken

SS_LINE = 'LISTEN 0      511          0.0.0.0:3000      0.0.0.0:*    users:(("node",pid=12345,fd=20))'


def test_parse_laws_on_users_snippet():
    snippet = 'users:(("node",pid=12345,fd=20))'
    assert parse_pid(snippet) == 12345
    assert parse_cmd(snippet) == "node"


def test_parse_empty():
    status = parse_ss_output(3000, "")
    assert status.listening is False
    assert status.pid is None
    assert status.cmd is None
    assert status.err is None


def test_whitespace_only_output_is_not_listening():
    assert parse_ss_output(3000, "  \n\t\n").listening is False


@pytest.mark.parametrize("text", ["pid=", "users:((\"x\",pid=,fd=3))", "pid=abc", "no marker here"])
def test_pid_absent(text):
    assert parse_pid(text) is None


def test_pid_takes_first_marker_and_leading_digits():
    assert parse_pid("pid=42x,pid=7") == 42


def test_pid_overflowing_u32_is_absent():
    assert parse_pid("pid=99999999999") is None


@pytest.mark.parametrize(
    "text",
    ["users:(('node'))", '"node" no parens', 'users:((""', 'users:(("",pid=1))', 'users:(("   ",pid=1))'],
)
def test_cmd_absent(text):
    assert parse_cmd(text) is None


def test_cmd_ignores_quotes_before_marker():
    assert parse_cmd('"other" users:(("python3",pid=9,fd=4))') == "python3"


def test_full_ss_line():
    status = parse_ss_output(3000, SS_LINE + "\n")
    assert status.listening is True
    assert status.pid == 12345
    assert status.cmd == "node"
    assert status.err is None


def test_listening_without_owner_details():
    # Without privileges `ss -p` omits the users:(...) column.
    status = parse_ss_output(5432, "LISTEN 0 244 127.0.0.1:5432 0.0.0.0:*\n")
    assert status.listening is True
    assert status.pid is None
    assert status.cmd is None


def test_port_status_idle_record():
    runner = FakeRunner(output="")
    status = port_status(3000, runner)
    assert status.model_dump(mode="json") == {
        "port": 3000,
        "listening": False,
        "pid": None,
        "cmd": None,
        "err": None,
    }
    assert runner.commands == ["ss -ltnpH 'sport = :3000' 2>/dev/null || true"]


def test_port_status_runner_failure_becomes_err():
    runner = FakeRunner(error=SpawnFailed("Failed to spawn shell: nope"))
    status = port_status(8080, runner)
    assert status.listening is False
    assert status.err == "Failed to spawn shell: nope"
    assert status.pid is None


def test_port_status_non_zero_exit_becomes_err():
    status = port_status(8080, FakeRunner(error=NonZeroExit(1, "ss: weird")))
    assert status.err == "Command failed (exit 1):\nss: weird"


@pytest.mark.parametrize("port", [0, 70000, "80; rm -rf /"])
def test_port_status_rejects_bad_ports(port):
    runner = FakeRunner()
    with pytest.raises(UnsafeToken):
        port_status(port, runner)
    assert runner.commands == []


def test_kill_port_command_and_output():
    runner = FakeRunner(output="3000/tcp:            12345\n")
    assert kill_port(3000, runner) == "3000/tcp:            12345\n"
    assert runner.commands == ["fuser -k 3000/tcp || true"]


def test_kill_port_idle_returns_empty_output():
    assert kill_port(3001, FakeRunner(output="")) == ""


def test_command_builders():
    assert probe_command(22) == "ss -ltnpH 'sport = :22' 2>/dev/null || true"
    assert kill_command(22) == "fuser -k 22/tcp || true"
