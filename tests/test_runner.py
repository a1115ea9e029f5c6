import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from branch_diff.errors import CommandError, CommandTimeoutError, SpawnError
from branch_diff.runner import run_git, run_git_concurrently


class _Proc:
    def __init__(self, returncode=0, stdout=b"", stderr=b""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@patch("branch_diff.runner.subprocess.run")
def test_run_git_uses_argv_cwd_and_c_locale(mock_run):
    mock_run.return_value = _Proc(stdout=b"/repo\n")
    out = run_git(Path("/repo/sub"), ["rev-parse", "--show-toplevel"])

    assert out == "/repo\n"
    args, kwargs = mock_run.call_args
    assert args[0] == ["git", "rev-parse", "--show-toplevel"]
    assert kwargs["cwd"] == "/repo/sub"
    assert kwargs["env"]["LC_ALL"] == "C"
    assert kwargs.get("shell", False) is False
    assert kwargs["timeout"] is None


@patch("branch_diff.runner.subprocess.run")
def test_run_git_keeps_shell_metacharacters_literal(mock_run):
    mock_run.return_value = _Proc(stdout=b"abc\n")
    run_git(".", ["merge-base", "feat;rm -rf $HOME", "HEAD"])
    assert mock_run.call_args[0][0][2] == "feat;rm -rf $HOME"


@patch("branch_diff.runner.subprocess.run")
def test_run_git_decodes_invalid_utf8(mock_run):
    mock_run.return_value = _Proc(stdout=b"caf\xe9\n")
    assert run_git(".", ["show", "HEAD:a.txt"]) == "caf\ufffd\n"


@patch("branch_diff.runner.subprocess.run")
def test_run_git_nonzero_exit_carries_stderr(mock_run):
    mock_run.return_value = _Proc(returncode=128, stderr=b"fatal: bad revision 'nope'\n")
    with pytest.raises(CommandError) as info:
        run_git(".", ["diff", "--name-status", "nope"])

    assert info.value.exit_code == 128
    assert info.value.message == "fatal: bad revision 'nope'"
    assert info.value.command == ["git", "diff", "--name-status", "nope"]


@patch("branch_diff.runner.subprocess.run")
def test_run_git_falls_back_to_stdout_when_stderr_empty(mock_run):
    mock_run.return_value = _Proc(returncode=1, stdout=b"something odd\n")
    with pytest.raises(CommandError) as info:
        run_git(".", ["merge-base", "a", "b"])
    assert info.value.message == "something odd"


def test_run_git_missing_executable():
    with patch("branch_diff.runner.subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(SpawnError) as info:
            run_git(".", ["status"], git="git-does-not-exist")
    assert not isinstance(info.value, CommandError)
    assert "git-does-not-exist" in str(info.value)


def test_run_git_permission_denied():
    with patch("branch_diff.runner.subprocess.run", side_effect=PermissionError(13, "Permission denied")):
        with pytest.raises(SpawnError):
            run_git(".", ["status"])


def test_run_git_timeout_is_command_error():
    expired = subprocess.TimeoutExpired(cmd=["git", "log"], timeout=0.5)
    with patch("branch_diff.runner.subprocess.run", side_effect=expired):
        with pytest.raises(CommandTimeoutError) as info:
            run_git(".", ["log"], timeout=0.5)
    assert isinstance(info.value, CommandError)


@patch("branch_diff.runner.subprocess.run")
def test_run_git_concurrently_preserves_argument_order(mock_run):
    def fake(cmd, **kwargs):
        return _Proc(stdout=" ".join(cmd[1:]).encode())

    mock_run.side_effect = fake
    out = run_git_concurrently(".", ["branch", "-a"], ["branch", "--show-current"])
    assert out == ["branch -a", "branch --show-current"]


@patch("branch_diff.runner.subprocess.run")
def test_run_git_concurrently_propagates_failure(mock_run):
    def fake(cmd, **kwargs):
        if "--show-current" in cmd:
            return _Proc(returncode=128, stderr=b"fatal: not a git repository")
        return _Proc(stdout=b"main\n")

    mock_run.side_effect = fake
    with pytest.raises(CommandError):
        run_git_concurrently(".", ["branch", "-a"], ["branch", "--show-current"])
