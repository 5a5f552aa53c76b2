"""Terminal UI for gitwalk."""

from gitwalk.ui.terminal import QUIT_KEY, Terminal
from gitwalk.ui.theme import (
    DEFAULT_THEME,
    MINIMAL_THEME,
    THEMES,
    Theme,
    get_theme,
    list_themes,
)

__all__ = [
    "Terminal",
    "QUIT_KEY",
    "Theme",
    "DEFAULT_THEME",
    "MINIMAL_THEME",
    "THEMES",
    "get_theme",
    "list_themes",
]
