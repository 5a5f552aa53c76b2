"""Single-key menus.

Every menu has an implicit quit option bound to Q. Keys are matched
case-insensitively and must be unique within a menu.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from gitwalk.errors import MenuDefinitionError
from gitwalk.flow.actions import Action, ActionKind
from gitwalk.ui.terminal import QUIT_KEY, Terminal

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Keys for indexed menus, assigned by position. Never contains Q.
INDEX_KEYS = "123456789ABCDEFGHIJKLMNOPRSTUVWXYZ"

NEXT_PAGE_KEY = ">"
PREVIOUS_PAGE_KEY = "<"
DEFAULT_PAGE_SIZE = 9


@dataclass(frozen=True)
class MenuOption:
    """One selectable entry of a menu."""

    key: str
    description: str
    action: Action


def _check_key(key: str, seen: set[str]) -> str:
    if len(key) != 1 or not key.isprintable() or key.isspace():
        raise MenuDefinitionError(key, "must be a single printable character")
    normalized = key.upper()
    if normalized == QUIT_KEY:
        raise MenuDefinitionError(key, "reserved for quit")
    if normalized in seen:
        raise MenuDefinitionError(key, "duplicate key")
    return normalized


class Menu:
    """A validated prompt plus its ordered options.

    Raises:
        MenuDefinitionError: On duplicate, reserved or unprintable keys.
    """

    def __init__(self, prompt: str, options: Iterable[MenuOption]):
        self.prompt = prompt
        self.options = list(options)
        self._actions: dict[str, Action] = {}
        for option in self.options:
            key = _check_key(option.key, set(self._actions))
            self._actions[key] = option.action

    def lookup(self, key: str) -> Optional[Action]:
        """Action bound to a pressed key, quit for Q/q, None if unbound."""
        normalized = key.upper()
        if normalized == QUIT_KEY:
            return Action.quit()
        return self._actions.get(normalized)

    @property
    def entries(self) -> list[tuple[str, str]]:
        return [(option.key, option.description) for option in self.options]

    def __len__(self) -> int:
        return len(self.options)


class MenuEngine:
    """Renders menus and blocks until a bound key is pressed."""

    def __init__(self, terminal: Terminal, page_size: int = DEFAULT_PAGE_SIZE):
        self.terminal = terminal
        self.page_size = page_size

    def present(self, prompt: str, options: Iterable[MenuOption]) -> Action:
        """Show a menu and return the action of the pressed key.

        An unbound key prints an inline notice and waits for the next key
        without rendering the menu again.
        """
        menu = Menu(prompt, options)
        self.terminal.show_menu(menu.prompt, menu.entries)

        while True:
            key = self.terminal.read_key()
            action = menu.lookup(key)
            if action is not None:
                logger.debug(f"Menu {prompt!r}: key {key!r} -> {action.kind.value}")
                return action
            self.terminal.invalid_input()

    def choose(
        self,
        prompt: str,
        items: Sequence[T],
        make_action: Callable[[T], Action],
        describe: Callable[[T], str] = str,
        fixed: Sequence[MenuOption] = (),
    ) -> Action:
        """Present items under positional keys, paginating when needed.

        Args:
            prompt: Question shown above the options
            items: Values to choose from, in display order
            make_action: Builds the action bound to an item
            describe: Text shown for an item
            fixed: Options shown on every page after the items

        Returns:
            The chosen action. Page navigation is handled here and never
            returned.
        """
        taken = {option.key.upper() for option in fixed}
        keys = [key for key in INDEX_KEYS if key not in taken]
        per_page = min(self.page_size, len(keys))
        if per_page < 1:
            raise MenuDefinitionError(",".join(sorted(taken)), "no index keys left for items")

        pages = max(1, -(-len(items) // per_page))
        page = 0
        while True:
            start = page * per_page
            options = [
                MenuOption(key, describe(item), make_action(item))
                for key, item in zip(keys, items[start:start + per_page])
            ]
            options.extend(fixed)
            if page > 0:
                options.append(MenuOption(PREVIOUS_PAGE_KEY, "Previous page", Action.previous_page()))
            if page < pages - 1:
                options.append(MenuOption(NEXT_PAGE_KEY, "Next page", Action.next_page()))

            title = prompt if pages == 1 else f"{prompt} (page {page + 1}/{pages})"
            action = self.present(title, options)

            if action.kind is ActionKind.NEXT_PAGE:
                page += 1
            elif action.kind is ActionKind.PREVIOUS_PAGE:
                page -= 1
            else:
                return action
