"""Action dispatch.

Every ActionKind maps to exactly one handler. Handlers that need a
follow-up choice present it and dispatch the chosen action in turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from gitwalk.errors import FlowError, GeneratorError, GeneratorUnavailableError, QuitRequested
from gitwalk.flow.actions import Action, ActionKind, Outcome, OutcomeKind
from gitwalk.flow.menu import MenuEngine, MenuOption
from gitwalk.flow.resolver import UpstreamResolver
from gitwalk.generator import CommitMessageGenerator
from gitwalk.git.repository import GitRepository, RemoteBranch
from gitwalk.ui.terminal import Terminal

logger = logging.getLogger(__name__)

AICOMMIT_BEGIN = "AICOMMIT BEGIN"
AICOMMIT_END = "AICOMMIT END"

Handler = Callable[[Action], Outcome]


@dataclass
class FlowSession:
    """State kept across loop iterations: only the resolved target."""

    target: Optional[RemoteBranch] = None


class ActionDispatcher:
    """Executes actions against the repository and reports the results."""

    def __init__(
        self,
        repo: GitRepository,
        terminal: Terminal,
        menus: MenuEngine,
        generator: CommitMessageGenerator,
        session: Optional[FlowSession] = None,
        set_upstream_after_push: bool = True,
    ):
        self.repo = repo
        self.terminal = terminal
        self.menus = menus
        self.generator = generator
        self.session = session or FlowSession()
        self.set_upstream_after_push = set_upstream_after_push
        self.resolver = UpstreamResolver(repo, terminal, menus, dispatch=self.dispatch)

        self._handlers: dict[ActionKind, Handler] = {
            ActionKind.SKIP: self._skip,
            ActionKind.QUIT: self._quit,
            ActionKind.STAGE_ALL: self._stage_all,
            ActionKind.COMMIT: self._commit,
            ActionKind.GENERATE_COMMIT_MESSAGE: self._generate_commit_message,
            ActionKind.MANUAL_COMMIT_MESSAGE: self._manual_commit_message,
            ActionKind.EXECUTE_COMMIT: self._execute_commit,
            ActionKind.MERGE: self._merge,
            ActionKind.MERGE_LOCAL: self._merge_local,
            ActionKind.MERGE_REMOTE: self._merge_remote,
            ActionKind.MERGE_REF: self._merge_ref,
            ActionKind.CHECKOUT: self._checkout,
            ActionKind.CHECKOUT_BRANCH: self._checkout_branch,
            ActionKind.CREATE_BRANCH: self._create_branch,
            ActionKind.PUSH: self._push,
            ActionKind.CONFIRM_PUSH: self._confirm_push,
            ActionKind.PULL: self._pull,
            ActionKind.ADD_REMOTE: self._add_remote,
            ActionKind.SELECT_REMOTE: self._select_remote,
            ActionKind.SELECT_BRANCH: self._select_branch,
            ActionKind.MANUAL_BRANCH_NAME: self._manual_branch_name,
            ActionKind.ABORT_UNRESOLVED: self._abort_unresolved,
            ActionKind.INIT_REPOSITORY: self._init_repository,
        }

    def dispatch(self, action: Action) -> Outcome:
        """Run the handler for an action.

        Raises:
            FlowError: If no handler is registered for the action kind.
        """
        handler = self._handlers.get(action.kind)
        if handler is None:
            raise FlowError(f"No handler for action: {action.kind.value}")

        logger.debug(f"Dispatching {action.kind.value}")
        try:
            outcome = handler(action)
        except QuitRequested:
            outcome = Outcome.quit()
        logger.debug(f"{action.kind.value} -> {outcome.kind.value}")
        return outcome

    # -------------------------------------------------------------------------
    # Flow control
    # -------------------------------------------------------------------------

    def _skip(self, action: Action) -> Outcome:
        return Outcome.advanced()

    def _quit(self, action: Action) -> Outcome:
        return Outcome.quit()

    # -------------------------------------------------------------------------
    # Staging and committing
    # -------------------------------------------------------------------------

    def _stage_all(self, action: Action) -> Outcome:
        self.terminal.report(self.repo.add_all())
        return Outcome.advanced()

    def _commit(self, action: Action) -> Outcome:
        """Obtain a commit message, confirm it, then commit."""
        while True:
            choice = self.menus.present(
                "Choose a way to commit",
                [
                    MenuOption("A", "Generate the commit message with AI", Action.generate_commit_message()),
                    MenuOption("I", "Input the commit message", Action.manual_commit_message()),
                ],
            )
            outcome = self.dispatch(choice)
            if outcome.kind in (OutcomeKind.QUIT, OutcomeKind.FAILED):
                return outcome
            if outcome.kind is not OutcomeKind.SELECTED:
                # No message obtained, ask again
                continue

            message = outcome.value
            self.terminal.notice(f"Commit message: {message}")
            confirm = self.menus.present(
                "Confirm the commit message",
                [
                    MenuOption("Y", "Commit with this message", Action.execute_commit(message)),
                    MenuOption("R", "Choose again", Action.skip()),
                ],
            )
            if confirm.kind is not ActionKind.SKIP:
                return self.dispatch(confirm)

    def _generate_commit_message(self, action: Action) -> Outcome:
        if not self.generator.is_available():
            error = GeneratorUnavailableError(self.generator.command, self.generator.install_hint)
            self.terminal.error(str(error))
            return Outcome.advanced()

        self.terminal.stream_start(AICOMMIT_BEGIN)
        try:
            message = self.generator.generate(on_chunk=self.terminal.stream_chunk)
        except GeneratorError as e:
            logger.debug(f"Generator failed: {e.to_dict()}")
            self.terminal.stream_end(AICOMMIT_END)
            self.terminal.error(str(e))
            if e.stderr:
                self.terminal.error(e.stderr.strip())
            return Outcome.advanced()

        self.terminal.stream_end(AICOMMIT_END)
        return Outcome.selected(message)

    def _manual_commit_message(self, action: Action) -> Outcome:
        message = self.terminal.read_line("Input the commit message:")
        if not message:
            self.terminal.error("Commit message cannot be empty.")
            return Outcome.advanced()
        return Outcome.selected(message)

    def _execute_commit(self, action: Action) -> Outcome:
        result = self.repo.commit(action.message or "")
        self.terminal.report(result)
        if not result.success:
            return Outcome.advanced()

        choice = self.menus.present(
            "Do you need push?",
            [
                MenuOption("Y", "Push now", Action.confirm_push()),
                MenuOption("N", "Not now", Action.skip()),
            ],
        )
        return self.dispatch(choice)

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    def _merge(self, action: Action) -> Outcome:
        choice = self.menus.present(
            "Choose a branch type to merge",
            [
                MenuOption("L", "Merge a local branch", Action.merge_local()),
                MenuOption("R", "Merge a remote branch", Action.merge_remote()),
            ],
        )
        return self.dispatch(choice)

    def _merge_local(self, action: Action) -> Outcome:
        current = self.repo.current_branch()
        branches = [branch for branch in self.repo.list_branches() if branch != current]
        if not branches:
            self.terminal.notice("No other local branch to merge.")
            return Outcome.advanced()

        choice = self.menus.choose("Choose a local branch to merge", branches, Action.merge_ref)
        return self.dispatch(choice)

    def _merge_remote(self, action: Action) -> Outcome:
        remote = self.resolver.choose_remote()
        if remote is None:
            return Outcome.advanced()
        target = self.resolver.choose_branch(remote)
        if target is None:
            return Outcome.advanced()
        return self.dispatch(Action.merge_ref(target.ref))

    def _merge_ref(self, action: Action) -> Outcome:
        result = self.repo.merge(action.ref)
        self.terminal.report(result)
        if not result.success:
            return Outcome.failed(f"Merging {action.ref} failed.")
        return Outcome.advanced()

    def _checkout(self, action: Action) -> Outcome:
        current = self.repo.current_branch()
        branches = [branch for branch in self.repo.list_branches() if branch != current]
        if not branches:
            self.terminal.notice("No other local branch to check out.")
            return Outcome.advanced()

        choice = self.menus.choose("Choose a branch to check out", branches, Action.checkout_branch)
        return self.dispatch(choice)

    def _checkout_branch(self, action: Action) -> Outcome:
        self.terminal.report(self.repo.checkout(action.branch))
        return Outcome.advanced()

    def _create_branch(self, action: Action) -> Outcome:
        name = self.terminal.read_line("Input the new branch name:")
        if not name:
            self.terminal.error("Branch name cannot be empty.")
            return Outcome.advanced()
        self.terminal.report(self.repo.create_and_checkout(name))
        return Outcome.advanced()

    # -------------------------------------------------------------------------
    # Syncing
    # -------------------------------------------------------------------------

    def _push(self, action: Action) -> Outcome:
        choice = self.menus.present(
            "Confirm to push?",
            [MenuOption("Y", "Push", Action.confirm_push())],
        )
        return self.dispatch(choice)

    def _confirm_push(self, action: Action) -> Outcome:
        target = self.session.target
        if target is None:
            target = self.resolver.resolve()
            if target is None:
                self.terminal.notice("No remote branch selected, nothing pushed.")
                return Outcome.advanced()
            self.session.target = target

        had_upstream = self.repo.get_upstream() is not None
        result = self.repo.push(target.remote, target.branch)
        self.terminal.report(result)
        if not result.success:
            return Outcome.failed(f"Pushing to {target} failed.")

        if not had_upstream and self.set_upstream_after_push:
            self.terminal.report(self.repo.set_upstream(target.remote, target.branch))
        return Outcome.advanced()

    def _pull(self, action: Action) -> Outcome:
        result = self.repo.pull(self.session.target)
        self.terminal.report(result)
        if not result.success:
            return Outcome.failed("Pull failed.")
        return Outcome.advanced()

    # -------------------------------------------------------------------------
    # Target selection
    # -------------------------------------------------------------------------

    def _add_remote(self, action: Action) -> Outcome:
        name = self.terminal.read_line("Input the remote name:")
        if not name:
            self.terminal.error("Remote name cannot be empty.")
            return Outcome.advanced()
        url = self.terminal.read_line(f"Input the url of {name}:")
        if not url:
            self.terminal.error("Remote url cannot be empty.")
            return Outcome.advanced()

        result = self.repo.add_remote(name, url)
        self.terminal.report(result)
        if not result.success:
            return Outcome.advanced()
        return Outcome.selected(name)

    def _select_remote(self, action: Action) -> Outcome:
        return Outcome.selected(action.remote)

    def _select_branch(self, action: Action) -> Outcome:
        return Outcome.selected(RemoteBranch(action.remote, action.branch))

    def _manual_branch_name(self, action: Action) -> Outcome:
        branch = self.terminal.read_line(f"Input the branch name of {action.remote}:")
        if not branch:
            self.terminal.error("Branch name cannot be empty.")
            return Outcome.advanced()
        return Outcome.selected(RemoteBranch(action.remote, branch))

    # -------------------------------------------------------------------------
    # Conflicts and setup
    # -------------------------------------------------------------------------

    def _abort_unresolved(self, action: Action) -> Outcome:
        return Outcome.failed("Conflicts are not resolved. Resolve them and run gitwalk again.")

    def _init_repository(self, action: Action) -> Outcome:
        result = self.repo.init()
        self.terminal.report(result)
        if not result.success:
            return Outcome.failed("Initializing the repository failed.")
        return Outcome.advanced()
