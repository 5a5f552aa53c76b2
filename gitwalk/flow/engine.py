"""The interactive flow loop.

Pre-flight checks, one upstream resolution, then repeatedly: classify the
repository, offer the menu for that state, dispatch the choice. Nothing but
the resolved target survives from one iteration to the next.
"""

from __future__ import annotations

import logging
from typing import Optional

from gitwalk.config import get_settings
from gitwalk.config.settings import Settings
from gitwalk.errors import (
    GitNotInstalledError,
    GitwalkError,
    NotARepositoryError,
    QuitRequested,
)
from gitwalk.flow.actions import Action, Outcome, OutcomeKind
from gitwalk.flow.dispatcher import ActionDispatcher, FlowSession
from gitwalk.flow.menu import MenuEngine, MenuOption
from gitwalk.generator import CommitMessageGenerator
from gitwalk.git.repository import GitRepository
from gitwalk.git.status import RepoState, classify
from gitwalk.git.utils import is_command_installed
from gitwalk.ui.terminal import Terminal

logger = logging.getLogger(__name__)

_MERGE = MenuOption("M", "Merge a branch", Action.merge())
_CHECKOUT_C = MenuOption("C", "Checkout a branch", Action.checkout())
_CHECKOUT_O = MenuOption("O", "Checkout a branch", Action.checkout())
_CREATE = MenuOption("B", "Create a branch", Action.create_branch())
_PUSH = MenuOption("P", "Push", Action.push())
_ADD_ALL = MenuOption("A", "Add all files", Action.stage_all())
_ADD_FILES = MenuOption("A", "Add files", Action.stage_all())
_COMMIT = MenuOption("C", "Commit", Action.commit())
_PULL = MenuOption("L", "Pull", Action.pull())

STATE_MENUS: dict[RepoState, list[MenuOption]] = {
    RepoState.CLEAN: [_MERGE, _CHECKOUT_C, _CREATE, _PUSH],
    RepoState.UNSTAGED: [_ADD_ALL, _CHECKOUT_O, _CREATE],
    RepoState.PARTIALLY_STAGED: [_ADD_FILES, _COMMIT],
    RepoState.FULLY_STAGED: [_COMMIT, _CHECKOUT_O, _MERGE, _CREATE],
    RepoState.PARTIALLY_COMMITTED: [_ADD_FILES, _CHECKOUT_O],
    RepoState.MESS_PARTIALLY_COMMITTED: [_COMMIT, _CHECKOUT_O],
    RepoState.MESS_FULLY_COMMITTED: [_COMMIT, _CHECKOUT_O],
    RepoState.FULLY_COMMITTED: [_MERGE, _PULL, _CHECKOUT_O, _PUSH],
    RepoState.CONFLICTED: [
        MenuOption("Y", "Conflicts resolved, add all files", Action.stage_all()),
        MenuOption("N", "Not resolved yet", Action.abort_unresolved()),
    ],
}

STATE_PROMPTS: dict[RepoState, str] = {
    RepoState.CLEAN: "Working tree clean, what next?",
    RepoState.UNSTAGED: "Found changes not staged, what next?",
    RepoState.PARTIALLY_STAGED: "Some changes are staged, what next?",
    RepoState.FULLY_STAGED: "All changes are staged, what next?",
    RepoState.PARTIALLY_COMMITTED: "Commits to push and changes not staged, what next?",
    RepoState.MESS_PARTIALLY_COMMITTED: "Commits to push, staged and unstaged changes, what next?",
    RepoState.MESS_FULLY_COMMITTED: "Commits to push and staged changes, what next?",
    RepoState.FULLY_COMMITTED: "Commits waiting to be pushed, what next?",
    RepoState.CONFLICTED: "Merge conflicts found. Have you resolved them?",
}


class FlowLoop:
    """Runs the stage, commit and sync loop until quit or failure."""

    def __init__(
        self,
        repo: GitRepository,
        terminal: Terminal,
        generator: Optional[CommitMessageGenerator] = None,
        settings: Optional[Settings] = None,
        auto_upstream: Optional[bool] = None,
    ):
        """Initialize the loop.

        Args:
            repo: Repository to operate on.
            terminal: Terminal for menus and messages.
            generator: Commit message generator, built from settings if omitted.
            settings: Settings, the global settings if omitted.
            auto_upstream: Overrides flow.auto_upstream when not None.
        """
        self.settings = settings or get_settings()
        self.repo = repo
        self.terminal = terminal
        self.generator = generator or CommitMessageGenerator(
            command=self.settings.generator.command,
            args=self.settings.generator.args,
            stream_delay=self.settings.generator.stream_delay,
            install_hint=self.settings.generator.install_hint,
            cwd=str(repo.path),
        )
        self.auto_upstream = (
            self.settings.flow.auto_upstream if auto_upstream is None else auto_upstream
        )

        self.session = FlowSession()
        self.menus = MenuEngine(terminal, page_size=self.settings.flow.page_size)
        self.dispatcher = ActionDispatcher(
            repo,
            terminal,
            self.menus,
            self.generator,
            session=self.session,
            set_upstream_after_push=self.settings.flow.set_upstream_after_push,
        )

    def run(self) -> int:
        """Run to completion.

        Returns:
            0 when the user quits, 1 after any unrecoverable failure.
        """
        try:
            self.preflight()
            self.resolve_target()
            while True:
                outcome = self.step()
                if outcome.kind is OutcomeKind.QUIT:
                    return 0
                if outcome.kind is OutcomeKind.FAILED:
                    self.terminal.error(outcome.message or "Failed.")
                    return 1
        except QuitRequested:
            return 0
        except GitwalkError as e:
            logger.debug(f"Flow stopped: {e.to_dict()}", exc_info=True)
            self.terminal.error(str(e))
            return 1

    def preflight(self) -> None:
        """Check git is installed and the working directory is a repository.

        Raises:
            GitNotInstalledError: If git cannot be found.
            NotARepositoryError: If not inside a repository and no new one
                was initialized.
            QuitRequested: If the user quits the initialization offer.
        """
        if not is_command_installed(self.repo.executable):
            raise GitNotInstalledError(self.repo.executable)

        if self.repo.is_inside_work_tree():
            return

        if not self.settings.flow.offer_init:
            raise NotARepositoryError(str(self.repo.path))

        action = self.menus.present(
            "Not in a git repository, initialize one here?",
            [MenuOption("Y", "Initialize a repository", Action.init_repository())],
        )
        outcome = self.dispatcher.dispatch(action)
        if outcome.kind is OutcomeKind.QUIT:
            raise QuitRequested()
        if outcome.kind is OutcomeKind.FAILED:
            raise NotARepositoryError(str(self.repo.path))

    def resolve_target(self) -> None:
        self.terminal.notice("Checking the remote branch...")
        self.session.target = self.dispatcher.resolver.resolve(auto=self.auto_upstream)
        if self.session.target:
            self.terminal.notice(f"Syncing with {self.session.target}")
        logger.debug(f"Resolved target: {self.session.target}")

    def current_state(self) -> RepoState:
        """Classify the repository as it is right now."""
        status_lines = self.repo.status_lines()
        target = self.session.target
        has_commits_to_push = target is not None and self.repo.has_commits_to_push(target)
        state = classify(status_lines, has_commits_to_push)
        logger.debug(f"State {state.value} ({len(status_lines)} changed paths, push pending: {has_commits_to_push})")
        return state

    def step(self) -> Outcome:
        """Run one iteration: classify, present the menu, dispatch."""
        state = self.current_state()
        action = self.menus.present(STATE_PROMPTS[state], STATE_MENUS[state])
        return self.dispatcher.dispatch(action)
