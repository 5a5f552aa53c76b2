"""Git utility functions for gitwalk."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gitwalk.errors import GitError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command: exit status and captured output."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    @property
    def error_text(self) -> str:
        """Stderr if there is any, otherwise a generic message."""
        return self.stderr.strip() or f"exit code {self.returncode}"

    @classmethod
    def from_completed(cls, completed: subprocess.CompletedProcess) -> "CommandResult":
        return cls(
            command=list(completed.args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def find_git_root(start_path: Path | str) -> Optional[Path]:
    """Find the root of a git repository.

    Walks up the directory tree from start_path looking for a .git entry.

    Args:
        start_path: Path to start searching from.

    Returns:
        Path to the repository root, or None if not in a git repository.
    """
    path = Path(start_path).resolve()

    for parent in [path] + list(path.parents):
        if (parent / ".git").exists():
            return parent

    return None


def is_command_installed(command: str) -> bool:
    """Check whether an executable is available on PATH."""
    return shutil.which(command) is not None


def run_command(
    cmd: list[str],
    cwd: Path | str | None = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """Run an external command and capture its result.

    Non-zero exit codes are returned, not raised.

    Raises:
        TimeoutError: If a timeout is given and the command exceeds it.
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise TimeoutError(f"Command timed out after {timeout}s: {' '.join(cmd)}")

    result = CommandResult.from_completed(completed)
    logger.debug(f"Command exited with {result.returncode}: {result.command_line}")
    return result


def run_git_command(
    args: list[str],
    cwd: Path | str | None = None,
    timeout: Optional[float] = None,
    check: bool = False,
    executable: str = "git",
) -> CommandResult:
    """Run a git command and return the result.

    Args:
        args: Git command arguments (without 'git' prefix).
        cwd: Working directory for the command.
        timeout: Command timeout in seconds, None to wait forever.
        check: If True, raise GitError on non-zero exit.
        executable: Git executable to invoke.

    Returns:
        CommandResult with stdout/stderr.

    Raises:
        GitError: If check=True and command fails.
        TimeoutError: If command times out.
    """
    result = run_command([executable] + args, cwd=cwd, timeout=timeout)

    if check and not result.success:
        error_msg = result.stderr.strip() or f"Git command failed with exit code {result.returncode}"
        raise GitError(error_msg, result.returncode, result.stderr)

    return result


def split_remote_ref(ref: str) -> tuple[str, str]:
    """Split 'origin/feature/x' into ('origin', 'feature/x') on the first slash.

    Raises:
        ValueError: If the ref has no remote part.
    """
    remote, sep, branch = ref.strip().partition("/")
    if not sep or not remote or not branch:
        raise ValueError(f"Not a remote branch reference: {ref!r}")
    return remote, branch


def parse_branch_list(output: str, remote: Optional[str] = None) -> list[str]:
    """Parse `git branch --format=%(refname:short)` output.

    With a remote, keep only that remote's branches and strip the prefix.
    The symbolic 'origin/HEAD' entry (shown as 'origin' by newer git) is
    dropped.
    """
    branches = []
    prefix = f"{remote}/" if remote else None

    for line in output.splitlines():
        name = line.strip()
        if not name:
            continue
        if prefix is None:
            branches.append(name)
            continue
        if not name.startswith(prefix):
            continue
        branch = name[len(prefix):]
        if branch and branch != "HEAD":
            branches.append(branch)

    return branches
