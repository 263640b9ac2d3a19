"""Tests for the git command handler."""

import io
import subprocess

import pytest
from rich.console import Console

from qol.errors import GitCommandError
from qol.git import GitCommand, GitRunner, handle_command


class FakeGit:
    """Records git invocations and replays canned results."""

    def __init__(self, outputs=None, returncode=0, stderr=""):
        self.calls = []
        self.outputs = outputs or {}
        self.returncode = returncode
        self.stderr = stderr

    def __call__(self, cmd, cwd=None, capture_output=False, text=False):
        self.calls.append(cmd[1:])
        stdout = self.outputs.get(cmd[1], "")
        return subprocess.CompletedProcess(cmd, self.returncode, stdout, self.stderr)


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120)


def output_of(console: Console) -> str:
    return console.file.getvalue()


class TestGitRunner:
    """Tests for GitRunner."""

    def test_run_returns_stdout(self, monkeypatch, tmp_path):
        fake = FakeGit(outputs={"status": "## main\n"})
        monkeypatch.setattr(subprocess, "run", fake)

        assert GitRunner(tmp_path).run("status") == "## main\n"
        assert fake.calls == [["status"]]

    def test_non_zero_exit(self, monkeypatch, tmp_path):
        monkeypatch.setattr(
            subprocess, "run", FakeGit(returncode=128, stderr="fatal: not a git repository\n")
        )

        with pytest.raises(GitCommandError) as exc_info:
            GitRunner(tmp_path).run("status")
        assert exc_info.value.returncode == 128
        assert exc_info.value.stderr == "fatal: not a git repository"
        assert "not a git repository" in str(exc_info.value)

    def test_missing_executable(self, tmp_path):
        runner = GitRunner(tmp_path, executable="definitely-not-git-qol")

        with pytest.raises(GitCommandError):
            runner.run("status")


class TestHandleCommand:
    """Tests for dispatching subcommands."""

    @pytest.mark.parametrize(
        "command, expected",
        [
            (GitCommand.STATUS, ["status", "--short", "--branch"]),
            (GitCommand.BRANCHES, ["branch", "--list", "-vv"]),
            (GitCommand.PULL, ["pull", "--ff-only"]),
            (GitCommand.PUSH, ["push"]),
        ],
    )
    def test_simple_commands(self, monkeypatch, tmp_path, console, command, expected):
        fake = FakeGit()
        monkeypatch.setattr(subprocess, "run", fake)

        assert handle_command(command, GitRunner(tmp_path), console) is None
        assert fake.calls == [expected]

    def test_log_count(self, monkeypatch, tmp_path, console):
        fake = FakeGit(outputs={"log": "abc1234 First commit\n"})
        monkeypatch.setattr(subprocess, "run", fake)

        handle_command(GitCommand.LOG, GitRunner(tmp_path), console, count=3)
        assert fake.calls == [["log", "--oneline", "--decorate", "-n3"]]
        assert "abc1234 First commit" in output_of(console)

    def test_commit(self, monkeypatch, tmp_path, console):
        fake = FakeGit()
        monkeypatch.setattr(subprocess, "run", fake)

        handle_command(GitCommand.COMMIT, GitRunner(tmp_path), console, message="wip", stage_all=True)
        assert fake.calls == [["commit", "-a", "-m", "wip"]]

    def test_commit_requires_message(self, monkeypatch, tmp_path, console):
        fake = FakeGit()
        monkeypatch.setattr(subprocess, "run", fake)

        with pytest.raises(GitCommandError):
            handle_command(GitCommand.COMMIT, GitRunner(tmp_path), console)
        assert fake.calls == []

    def test_sync(self, monkeypatch, tmp_path, console):
        fake = FakeGit(outputs={"rev-parse": "main\n"})
        monkeypatch.setattr(subprocess, "run", fake)

        handle_command(GitCommand.SYNC, GitRunner(tmp_path), console)
        assert fake.calls == [
            ["rev-parse", "--abbrev-ref", "HEAD"],
            ["pull", "--rebase"],
            ["push"],
        ]
        assert "Synced main" in output_of(console)

    def test_failure_stops_sync(self, monkeypatch, tmp_path, console):
        fake = FakeGit(returncode=1, stderr="conflict")
        monkeypatch.setattr(subprocess, "run", fake)

        with pytest.raises(GitCommandError):
            handle_command(GitCommand.SYNC, GitRunner(tmp_path), console)
        assert len(fake.calls) == 1

    def test_plain_string_command(self, monkeypatch, tmp_path, console):
        fake = FakeGit()
        monkeypatch.setattr(subprocess, "run", fake)

        handle_command("status", GitRunner(tmp_path), console)
        assert fake.calls == [["status", "--short", "--branch"]]

    def test_unknown_command_runs_nothing(self, monkeypatch, tmp_path, console):
        fake = FakeGit()
        monkeypatch.setattr(subprocess, "run", fake)

        with pytest.raises(GitCommandError):
            handle_command("rebase-everything", GitRunner(tmp_path), console)
        assert fake.calls == []
