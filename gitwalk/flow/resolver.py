"""Push/pull target resolution.

Works out which remote and which branch on it the current branch syncs
with: the configured upstream if the user accepts it, otherwise a remote
(added on the spot when there is none) and a branch chosen from it.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from gitwalk.errors import QuitRequested
from gitwalk.flow.actions import Action, ActionKind, Outcome, OutcomeKind
from gitwalk.flow.menu import MenuEngine, MenuOption
from gitwalk.git.repository import GitRepository, RemoteBranch
from gitwalk.ui.terminal import Terminal

logger = logging.getLogger(__name__)

Dispatch = Callable[[Action], Outcome]


class UpstreamResolver:
    """Determines the effective push/pull target.

    Selections made in the resolver's menus are dispatched like any other
    action, so adding a remote or typing a branch name behaves the same
    here as everywhere else. Picking quit raises QuitRequested.
    """

    def __init__(
        self,
        repo: GitRepository,
        terminal: Terminal,
        menus: MenuEngine,
        dispatch: Dispatch,
    ):
        self.repo = repo
        self.terminal = terminal
        self.menus = menus
        self.dispatch = dispatch

    def resolve(self, auto: bool = False) -> Optional[RemoteBranch]:
        """Resolve the target, asking the user unless auto is set.

        Returns:
            The target, or None when the user declines to set one up.

        Raises:
            QuitRequested: If the user picks quit in any of the menus.
        """
        if auto:
            return self.resolve_automatically()

        upstream = self.repo.get_upstream()
        if upstream and self._confirm_upstream(upstream):
            return upstream
        return self.choose_target()

    def resolve_automatically(self) -> Optional[RemoteBranch]:
        """Resolve without prompting.

        Uses the configured upstream, else the first remote that has a
        branch named like the current branch, else None.
        """
        upstream = self.repo.get_upstream()
        if upstream:
            logger.debug(f"Using configured upstream {upstream}")
            return upstream

        local = self.repo.current_branch()
        if not local:
            return None

        for remote in self.repo.list_remotes():
            if local in self.repo.list_branches(remote):
                logger.debug(f"Found {remote}/{local} for current branch")
                return RemoteBranch(remote, local)
        return None

    def choose_target(self) -> Optional[RemoteBranch]:
        remote = self.choose_remote()
        if remote is None:
            return None
        return self.choose_branch(remote)

    def choose_remote(self) -> Optional[str]:
        """Pick a remote, offering to add one when none is configured."""
        remotes = self.repo.list_remotes()
        if not remotes:
            return self._offer_new_remote()

        if len(remotes) == 1:
            self.terminal.notice(f"Using remote: {remotes[0]}")
            return remotes[0]

        action = self.menus.choose("Choose a remote", remotes, Action.select_remote)
        return self._selected(action)

    def choose_branch(self, remote: str) -> Optional[RemoteBranch]:
        """Pick a branch of a remote.

        When the remote has a branch named like the current branch, that
        branch is the only one offered. Otherwise all branches of the remote
        are listed along with the current branch name.
        """
        local = self.repo.current_branch()
        branches = self.repo.list_branches(remote)
        manual = MenuOption(
            "M", "Input the branch name manually", Action.manual_branch_name(remote)
        )

        while True:
            if local and local in branches:
                action = self.menus.present(
                    f"Found {remote}/{local}, use it?",
                    [
                        MenuOption("Y", f"Use {remote}/{local}", Action.select_branch(remote, local)),
                        manual,
                    ],
                )
            else:
                fixed = [manual]
                if local:
                    fixed.append(
                        MenuOption(
                            "L",
                            f"Use the local branch name: {local}",
                            Action.select_branch(remote, local),
                        )
                    )
                action = self.menus.choose(
                    f"Choose a branch of {remote}",
                    branches,
                    lambda branch: Action.select_branch(remote, branch),
                    fixed=fixed,
                )

            target = self._selected(action)
            if target is not None:
                return target

    def _confirm_upstream(self, upstream: RemoteBranch) -> bool:
        action = self.menus.present(
            f"Current upstream is {upstream}, use it?",
            [
                MenuOption(
                    "Y", f"Use {upstream}", Action.select_branch(upstream.remote, upstream.branch)
                ),
                MenuOption("O", "Choose another remote branch", Action.skip()),
            ],
        )
        if action.kind is ActionKind.QUIT:
            raise QuitRequested()
        return action.kind is ActionKind.SELECT_BRANCH

    def _offer_new_remote(self) -> Optional[str]:
        action = self.menus.present(
            "No remote found, add one?",
            [
                MenuOption("Y", "Add a remote", Action.add_remote()),
                MenuOption("S", "Not now", Action.skip()),
            ],
        )
        name = self._selected(action)
        if name is None:
            return None

        self.terminal.notice(f"Fetching {name}, this may take a while...")
        self.terminal.report(self.repo.fetch(name))
        return name

    def _selected(self, action: Action):
        """Dispatch a selection and return the chosen value, if any."""
        outcome = self.dispatch(action)
        if outcome.kind is OutcomeKind.QUIT:
            raise QuitRequested()
        if outcome.kind is OutcomeKind.SELECTED:
            return outcome.value
        return None
