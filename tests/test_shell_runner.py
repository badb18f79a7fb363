"""Login-shell runner."""

import shutil

import pytest

from adapters.shell_runner import BashShellRunner, combine_output, run_shell_output
from core.config import AppSettings
from core.domain.errors import NonZeroExit, SpawnFailed
from core.interfaces.shell import ShellRunner

needs_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not installed")


def test_combine_output():
    assert combine_output("out", "") == "out"
    assert combine_output("", "err") == "err"
    assert combine_output("out", "err") == "out\nerr"
    assert combine_output("out\n", "  \n") == "out\n"
    assert combine_output("", "") == ""


def test_bash_runner_satisfies_protocol():
    assert isinstance(BashShellRunner(), ShellRunner)


@needs_bash
def test_success_returns_stdout(home):
    assert "hello" in run_shell_output("echo hello")


@needs_bash
def test_stdout_then_stderr(home):
    output = run_shell_output("echo out; echo err >&2")
    assert output.index("out") < output.index("err")


@needs_bash
def test_non_zero_exit_carries_code_and_output(home):
    with pytest.raises(NonZeroExit) as excinfo:
        run_shell_output("echo partial; exit 3")
    assert excinfo.value.exit_code == 3
    assert "partial" in excinfo.value.output
    assert excinfo.value.message.startswith("Command failed (exit 3):\n")


@needs_bash
def test_killed_child_reports_sentinel(home):
    with pytest.raises(NonZeroExit) as excinfo:
        run_shell_output("kill -9 $$")
    assert excinfo.value.exit_code == -1


def test_spawn_failure(tmp_path):
    runner = BashShellRunner(AppSettings(shell=str(tmp_path / "no-such-shell")))
    with pytest.raises(SpawnFailed) as excinfo:
        runner.run_output("true")
    assert excinfo.value.message.startswith("Failed to spawn shell: ")
    with pytest.raises(SpawnFailed):
        runner.spawn("true")


@needs_bash
def test_spawn_returns_immediately(home):
    message = BashShellRunner().spawn("sleep 0.1")
    assert "pid" in message
