"""Git integration for gitwalk.

This package runs the git executable, parses its short status report and
classifies the working repository into a RepoState.
"""

from gitwalk.git.repository import GitRepository, RemoteBranch
from gitwalk.git.status import (
    RepoState,
    StatusLine,
    classify,
    parse_status_line,
    parse_status_output,
)
from gitwalk.git.utils import (
    CommandResult,
    find_git_root,
    is_command_installed,
    run_command,
    run_git_command,
)

__all__ = [
    # Main class
    "GitRepository",
    # Data classes
    "RemoteBranch",
    "RepoState",
    "StatusLine",
    "CommandResult",
    # Classification
    "classify",
    "parse_status_line",
    "parse_status_output",
    # Utility functions
    "find_git_root",
    "is_command_installed",
    "run_command",
    "run_git_command",
]
