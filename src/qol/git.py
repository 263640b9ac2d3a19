"""Git repository shortcuts.

Each GitCommand maps to one or more invocations of the git executable in
the working directory. Output is printed as git produces it.
"""

import logging
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional

from rich.console import Console

from .errors import GitCommandError

logger = logging.getLogger(__name__)


class GitCommand(str, Enum):
    """Subcommands accepted by `qol git`."""

    STATUS = "status"
    LOG = "log"
    BRANCHES = "branches"
    PULL = "pull"
    PUSH = "push"
    COMMIT = "commit"
    SYNC = "sync"


class GitRunner:
    """Runs git in a fixed working directory."""

    def __init__(self, cwd: Optional[Path] = None, executable: str = "git"):
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.executable = executable

    def run(self, *args: str) -> str:
        """Run git with the given arguments.

        Returns:
            Captured stdout

        Raises:
            GitCommandError: If git is missing or exits non-zero
        """
        cmd = [self.executable, *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.cwd)
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.cwd),
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise GitCommandError(f"{self.executable} executable not found") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise GitCommandError(
                f"git {' '.join(args)} failed ({result.returncode}): {stderr}",
                returncode=result.returncode,
                stderr=stderr,
            )
        return result.stdout

    def current_branch(self) -> str:
        return self.run("rev-parse", "--abbrev-ref", "HEAD").strip()


def handle_command(
    command: GitCommand,
    runner: GitRunner,
    console: Console,
    message: Optional[str] = None,
    count: int = 10,
    stage_all: bool = False,
) -> None:
    """Dispatch one git subcommand.

    Args:
        command: Subcommand to run
        runner: GitRunner bound to the repository
        console: Where git's output is printed
        message: Commit message (commit only)
        count: Number of log entries (log only)
        stage_all: Stage tracked changes before committing (commit only)
    """
    try:
        command = GitCommand(command)
    except ValueError as e:
        raise GitCommandError(f"Unknown git command: {command}") from e

    if command is GitCommand.STATUS:
        output = runner.run("status", "--short", "--branch")
    elif command is GitCommand.LOG:
        output = runner.run("log", "--oneline", "--decorate", f"-n{count}")
    elif command is GitCommand.BRANCHES:
        output = runner.run("branch", "--list", "-vv")
    elif command is GitCommand.PULL:
        output = runner.run("pull", "--ff-only")
    elif command is GitCommand.PUSH:
        output = runner.run("push")
    elif command is GitCommand.COMMIT:
        if not message:
            raise GitCommandError("A commit message is required")
        args = ["commit", "-m", message]
        if stage_all:
            args.insert(1, "-a")
        output = runner.run(*args)
    elif command is GitCommand.SYNC:
        # rebase onto upstream, then publish
        branch = runner.current_branch()
        output = runner.run("pull", "--rebase")
        output += runner.run("push")
    else:
        raise GitCommandError(f"Unknown git command: {command}")

    if output.strip():
        console.print(output.rstrip(), markup=False, highlight=False)
    if command is GitCommand.SYNC:
        console.print(f"[green]✓[/green] Synced {branch}")
