"""Repository state classification from short status output.

`git status --porcelain=v1` reports one line per path: an index column,
a worktree column, a space, then the path. The classifier reduces those
lines plus a "commits waiting to be pushed" flag to a single RepoState.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from gitwalk.errors import StatusParseError

# Column codes that mean "ready for the next commit" / "not yet in the index"
STAGED_CODES = frozenset("MADRCT")
UNSTAGED_CODES = frozenset("MD?TRC!")

# Unmerged pairs git reports during a conflicted merge
CONFLICT_PAIRS = frozenset({
    ("U", "U"),
    ("A", "A"),
    ("D", "D"),
    ("A", "U"),
    ("U", "A"),
    ("D", "U"),
    ("U", "D"),
})

_COLUMN_ALPHABET = frozenset(" MTADRCU?!")


class RepoState(Enum):
    """Mutually exclusive states of the working repository."""

    CLEAN = "clean"
    UNSTAGED = "unstaged"
    PARTIALLY_STAGED = "partially_staged"
    FULLY_STAGED = "fully_staged"
    PARTIALLY_COMMITTED = "partially_committed"
    MESS_PARTIALLY_COMMITTED = "mess_partially_committed"
    MESS_FULLY_COMMITTED = "mess_fully_committed"
    FULLY_COMMITTED = "fully_committed"
    CONFLICTED = "conflicted"


# (has_commits_to_push, staged, unstaged) -> state
_STATE_TABLE: dict[tuple[bool, bool, bool], RepoState] = {
    (False, False, False): RepoState.CLEAN,
    (False, False, True): RepoState.UNSTAGED,
    (False, True, False): RepoState.FULLY_STAGED,
    (False, True, True): RepoState.PARTIALLY_STAGED,
    (True, False, False): RepoState.FULLY_COMMITTED,
    (True, False, True): RepoState.PARTIALLY_COMMITTED,
    (True, True, False): RepoState.MESS_FULLY_COMMITTED,
    (True, True, True): RepoState.MESS_PARTIALLY_COMMITTED,
}


@dataclass(frozen=True)
class StatusLine:
    """A single entry of the short status report."""

    index: str
    worktree: str
    path: str

    def __post_init__(self) -> None:
        _validate_code(self.index, self.worktree, f"{self.index}{self.worktree} {self.path}")

    @property
    def code(self) -> str:
        return self.index + self.worktree

    @property
    def is_staged(self) -> bool:
        return self.index in STAGED_CODES

    @property
    def is_unstaged(self) -> bool:
        return self.worktree in UNSTAGED_CODES

    @property
    def needs_resolve(self) -> bool:
        return (self.index, self.worktree) in CONFLICT_PAIRS


def _validate_code(index: str, worktree: str, line: str) -> None:
    if index not in _COLUMN_ALPHABET or worktree not in _COLUMN_ALPHABET:
        raise StatusParseError(line)
    if index == " " and worktree == " ":
        raise StatusParseError(line, "empty status code")
    # '?' and '!' only appear as the untracked/ignored pairs
    for marker in "?!":
        if (index == marker) != (worktree == marker):
            raise StatusParseError(line)


def parse_status_line(line: str) -> StatusLine:
    """Parse one porcelain v1 line into a StatusLine.

    Raises:
        StatusParseError: If the line is too short or its code is unknown.
    """
    if len(line) < 4 or line[2] != " ":
        raise StatusParseError(line, "malformed status line")

    path = line[3:]
    # Renames and copies are reported as "old -> new"
    if " -> " in path:
        path = path.split(" -> ", 1)[1]

    try:
        return StatusLine(index=line[0], worktree=line[1], path=path)
    except StatusParseError:
        raise StatusParseError(line) from None


def parse_status_output(output: str) -> list[StatusLine]:
    """Parse a full short status report. Blank lines are skipped."""
    return [parse_status_line(line) for line in output.splitlines() if line.strip()]


def classify(
    status_lines: Iterable[StatusLine | str],
    has_commits_to_push: bool,
) -> RepoState:
    """Reduce status lines and the pending-push flag to a RepoState.

    Pure function of its inputs. Raw lines are parsed first, so an
    unrecognized code raises StatusParseError before anything is
    classified. Conflicts override every other state.
    """
    parsed = [
        parse_status_line(line) if isinstance(line, str) else line
        for line in status_lines
    ]

    staged = False
    unstaged = False

    for status_line in parsed:
        if status_line.needs_resolve:
            return RepoState.CONFLICTED
        staged = staged or status_line.is_staged
        unstaged = unstaged or status_line.is_unstaged

    return _STATE_TABLE[(has_commits_to_push, staged, unstaged)]
