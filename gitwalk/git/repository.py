"""Git repository operations for gitwalk."""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from gitwalk.errors import GitError
from gitwalk.git.status import StatusLine, parse_status_output
from gitwalk.git.utils import (
    CommandResult,
    find_git_root,
    parse_branch_list,
    run_git_command,
    split_remote_ref,
)

logger = logging.getLogger(__name__)

__all__ = [
    "GitRepository",
    "RemoteBranch",
    "GitError",
]


@dataclass(frozen=True)
class RemoteBranch:
    """A push/pull target: a remote name plus a branch on that remote."""

    remote: str
    branch: str

    @property
    def ref(self) -> str:
        """Remote tracking ref, e.g. 'origin/main'."""
        return f"{self.remote}/{self.branch}"

    @classmethod
    def parse(cls, ref: str) -> "RemoteBranch":
        """Parse 'origin/feature/x' into RemoteBranch('origin', 'feature/x')."""
        remote, branch = split_remote_ref(ref)
        return cls(remote=remote, branch=branch)

    def __str__(self) -> str:
        return self.ref


class GitRepository:
    """A working repository, operated through the git executable.

    Queries raise GitError when git fails. Mutating operations return the
    CommandResult so callers can report stderr and decide how to continue.
    """

    def __init__(
        self,
        path: Path | str = ".",
        executable: str = "git",
        timeout: Optional[float] = None,
        on_command: Optional[Callable[[str], None]] = None,
    ):
        """Initialize a GitRepository.

        Args:
            path: Working directory git commands run in.
            executable: Git executable to invoke.
            timeout: Per-command timeout in seconds, None to wait forever.
            on_command: Called with the command line before each mutating
                command runs.
        """
        self.path = Path(path).resolve()
        self.executable = executable
        self.timeout = timeout
        self.on_command = on_command

    @classmethod
    def find(cls, start_path: Path | str, **kwargs) -> Optional["GitRepository"]:
        """Find a git repository from a starting path.

        Returns:
            GitRepository rooted at the repository top level, or None.
        """
        root = find_git_root(start_path)
        if root:
            return cls(root, **kwargs)
        return None

    def _git(self, args: list[str]) -> CommandResult:
        """Run a git command in this repository without raising."""
        return run_git_command(
            args,
            cwd=self.path,
            timeout=self.timeout,
            executable=self.executable,
        )

    def _query(self, args: list[str]) -> str:
        """Run a read-only git command and return its stripped stdout.

        Raises:
            GitError: If git exits non-zero.
        """
        result = run_git_command(
            args,
            cwd=self.path,
            timeout=self.timeout,
            check=True,
            executable=self.executable,
        )
        return result.stdout.strip()

    def _run(self, args: list[str]) -> CommandResult:
        """Run a mutating git command, announcing it first."""
        if self.on_command:
            self.on_command(shlex.join([self.executable] + args))
        return self._git(args)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_inside_work_tree(self) -> bool:
        result = self._git(["rev-parse", "--is-inside-work-tree"])
        return result.success and result.stdout.strip() == "true"

    def status_output(self) -> str:
        """Raw short status report (porcelain v1)."""
        result = run_git_command(
            ["status", "--porcelain=v1"],
            cwd=self.path,
            timeout=self.timeout,
            check=True,
            executable=self.executable,
        )
        return result.stdout

    def status_lines(self) -> list[StatusLine]:
        """Parse the live status report.

        Raises:
            StatusParseError: On any unrecognized status code.
        """
        return parse_status_output(self.status_output())

    def has_commits_to_push(self, target: RemoteBranch) -> bool:
        """Whether HEAD has commits that are not on the target branch.

        A target branch that does not exist on the remote yet has every
        local commit pending. An unborn HEAD has nothing to push.
        """
        if not self._git(["rev-parse", "--verify", "--quiet", "HEAD"]).success:
            return False

        remote_ref = f"refs/remotes/{target.ref}"
        if not self._git(["rev-parse", "--verify", "--quiet", remote_ref]).success:
            return True
        return bool(self._query(["log", "--oneline", f"{target.ref}..HEAD"]))

    def current_branch(self) -> Optional[str]:
        """Current branch name, or None with a detached HEAD."""
        result = self._git(["symbolic-ref", "--short", "-q", "HEAD"])
        if not result.success:
            return None
        return result.stdout.strip() or None

    def get_upstream(self) -> Optional[RemoteBranch]:
        """Configured tracking branch of the current branch, if any."""
        result = self._git(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"])
        if not result.success:
            return None
        try:
            return RemoteBranch.parse(result.stdout)
        except ValueError:
            # Tracking a local branch, not a push target
            logger.debug(f"Ignoring non-remote upstream: {result.stdout.strip()}")
            return None

    def list_remotes(self) -> list[str]:
        output = self._query(["remote"])
        return [name for name in output.split() if name]

    def list_branches(self, remote: Optional[str] = None) -> list[str]:
        """List local branches, or the branches of one remote."""
        args = ["branch", "--list", "--format=%(refname:short)"]
        if remote:
            args.insert(1, "-r")
        return parse_branch_list(self._query(args), remote=remote)

    # -------------------------------------------------------------------------
    # Mutating operations
    # -------------------------------------------------------------------------

    def init(self) -> CommandResult:
        return self._run(["init"])

    def add_all(self) -> CommandResult:
        return self._run(["add", "--all"])

    def commit(self, message: str) -> CommandResult:
        return self._run(["commit", "-m", message])

    def add_remote(self, name: str, url: str) -> CommandResult:
        return self._run(["remote", "add", name, url])

    def fetch(self, remote: str) -> CommandResult:
        return self._run(["fetch", remote])

    def merge(self, ref: str) -> CommandResult:
        return self._run(["merge", "--no-edit", ref])

    def pull(self, target: Optional[RemoteBranch] = None) -> CommandResult:
        args = ["pull"]
        if target:
            args.extend([target.remote, target.branch])
        return self._run(args)

    def push(self, remote: str, branch: str) -> CommandResult:
        return self._run(["push", remote, branch])

    def checkout(self, branch: str) -> CommandResult:
        return self._run(["checkout", branch])

    def create_and_checkout(self, branch: str) -> CommandResult:
        return self._run(["checkout", "-b", branch])

    def set_upstream(self, remote: str, branch: str) -> CommandResult:
        return self._run(["branch", f"--set-upstream-to={remote}/{branch}"])
