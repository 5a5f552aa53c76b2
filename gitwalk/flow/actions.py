"""Action and outcome types.

Menus produce Actions, the dispatcher turns each Action into an Outcome.
Both are plain data: the kind field decides which other fields are set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ActionKind(Enum):
    """Everything a menu option can ask the dispatcher to do."""

    # Flow control
    SKIP = "skip"
    QUIT = "quit"
    NEXT_PAGE = "next_page"
    PREVIOUS_PAGE = "previous_page"

    # Staging and committing
    STAGE_ALL = "stage_all"
    COMMIT = "commit"
    GENERATE_COMMIT_MESSAGE = "generate_commit_message"
    MANUAL_COMMIT_MESSAGE = "manual_commit_message"
    EXECUTE_COMMIT = "execute_commit"

    # Branches
    MERGE = "merge"
    MERGE_LOCAL = "merge_local"
    MERGE_REMOTE = "merge_remote"
    MERGE_REF = "merge_ref"
    CHECKOUT = "checkout"
    CHECKOUT_BRANCH = "checkout_branch"
    CREATE_BRANCH = "create_branch"

    # Syncing
    PUSH = "push"
    CONFIRM_PUSH = "confirm_push"
    PULL = "pull"

    # Push/pull target selection
    ADD_REMOTE = "add_remote"
    SELECT_REMOTE = "select_remote"
    SELECT_BRANCH = "select_branch"
    MANUAL_BRANCH_NAME = "manual_branch_name"

    # Conflicts and setup
    ABORT_UNRESOLVED = "abort_unresolved"
    INIT_REPOSITORY = "init_repository"


@dataclass(frozen=True)
class Action:
    """A selected menu action.

    The kind field determines which other fields are populated:
    - EXECUTE_COMMIT: message
    - SELECT_REMOTE, MANUAL_BRANCH_NAME: remote
    - SELECT_BRANCH: remote, branch
    - CHECKOUT_BRANCH: branch
    - MERGE_REF: ref
    - everything else: just the kind
    """

    kind: ActionKind
    message: Optional[str] = None
    remote: Optional[str] = None
    branch: Optional[str] = None
    ref: Optional[str] = None

    @classmethod
    def skip(cls) -> "Action":
        return cls(ActionKind.SKIP)

    @classmethod
    def quit(cls) -> "Action":
        return cls(ActionKind.QUIT)

    @classmethod
    def next_page(cls) -> "Action":
        return cls(ActionKind.NEXT_PAGE)

    @classmethod
    def previous_page(cls) -> "Action":
        return cls(ActionKind.PREVIOUS_PAGE)

    @classmethod
    def stage_all(cls) -> "Action":
        return cls(ActionKind.STAGE_ALL)

    @classmethod
    def commit(cls) -> "Action":
        """Ask how to obtain a commit message, then commit."""
        return cls(ActionKind.COMMIT)

    @classmethod
    def generate_commit_message(cls) -> "Action":
        return cls(ActionKind.GENERATE_COMMIT_MESSAGE)

    @classmethod
    def manual_commit_message(cls) -> "Action":
        return cls(ActionKind.MANUAL_COMMIT_MESSAGE)

    @classmethod
    def execute_commit(cls, message: str) -> "Action":
        return cls(ActionKind.EXECUTE_COMMIT, message=message)

    @classmethod
    def merge(cls) -> "Action":
        return cls(ActionKind.MERGE)

    @classmethod
    def merge_local(cls) -> "Action":
        return cls(ActionKind.MERGE_LOCAL)

    @classmethod
    def merge_remote(cls) -> "Action":
        return cls(ActionKind.MERGE_REMOTE)

    @classmethod
    def merge_ref(cls, ref: str) -> "Action":
        return cls(ActionKind.MERGE_REF, ref=ref)

    @classmethod
    def checkout(cls) -> "Action":
        return cls(ActionKind.CHECKOUT)

    @classmethod
    def checkout_branch(cls, branch: str) -> "Action":
        return cls(ActionKind.CHECKOUT_BRANCH, branch=branch)

    @classmethod
    def create_branch(cls) -> "Action":
        return cls(ActionKind.CREATE_BRANCH)

    @classmethod
    def push(cls) -> "Action":
        """Ask for confirmation, then push."""
        return cls(ActionKind.PUSH)

    @classmethod
    def confirm_push(cls) -> "Action":
        """Push right away, resolving the target first if needed."""
        return cls(ActionKind.CONFIRM_PUSH)

    @classmethod
    def pull(cls) -> "Action":
        return cls(ActionKind.PULL)

    @classmethod
    def add_remote(cls) -> "Action":
        return cls(ActionKind.ADD_REMOTE)

    @classmethod
    def select_remote(cls, remote: str) -> "Action":
        return cls(ActionKind.SELECT_REMOTE, remote=remote)

    @classmethod
    def select_branch(cls, remote: str, branch: str) -> "Action":
        return cls(ActionKind.SELECT_BRANCH, remote=remote, branch=branch)

    @classmethod
    def manual_branch_name(cls, remote: str) -> "Action":
        return cls(ActionKind.MANUAL_BRANCH_NAME, remote=remote)

    @classmethod
    def abort_unresolved(cls) -> "Action":
        return cls(ActionKind.ABORT_UNRESOLVED)

    @classmethod
    def init_repository(cls) -> "Action":
        return cls(ActionKind.INIT_REPOSITORY)


class OutcomeKind(Enum):
    """How a dispatched action ended."""

    ADVANCED = "advanced"  # Done (or failed recoverably), re-classify
    SELECTED = "selected"  # A value was chosen for the caller
    QUIT = "quit"  # User asked to leave
    FAILED = "failed"  # Unrecoverable, end the run with exit code 1


@dataclass(frozen=True)
class Outcome:
    """Result of dispatching an Action."""

    kind: OutcomeKind
    message: Optional[str] = None
    value: Any = None

    @classmethod
    def advanced(cls) -> "Outcome":
        return cls(OutcomeKind.ADVANCED)

    @classmethod
    def selected(cls, value: Any) -> "Outcome":
        return cls(OutcomeKind.SELECTED, value=value)

    @classmethod
    def quit(cls) -> "Outcome":
        return cls(OutcomeKind.QUIT)

    @classmethod
    def failed(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.FAILED, message=message)
