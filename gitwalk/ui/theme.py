"""Theme definitions and color schemes for terminal output."""

from dataclasses import dataclass, field
from typing import Literal

from rich.style import Style


@dataclass
class Theme:
    """Color scheme and styling definitions for prompts and menus."""

    name: str
    description: str

    # Menu prompt, option keys and descriptions
    menu_styles: dict[str, Style] = field(default_factory=dict)

    # Notices, results and errors
    message_styles: dict[str, Style] = field(default_factory=dict)

    # Command lines, command output and generated commit messages
    output_styles: dict[str, Style] = field(default_factory=dict)

    def get_menu_style(self, element: str) -> Style:
        """Get the style for a menu element."""
        return self.menu_styles.get(element, Style())

    def get_message_style(self, kind: str) -> Style:
        """Get the style for a message kind."""
        return self.message_styles.get(kind.lower(), Style())

    def get_output_style(self, kind: str) -> Style:
        """Get the style for command or generator output."""
        return self.output_styles.get(kind, Style())


# Default theme - warm prompt, green keys, red quit key
DEFAULT_THEME = Theme(
    name="default",
    description="Distinct colors for prompts, keys and results",
    menu_styles={
        "prompt": Style(color="#ECB159", bold=True),
        "key": Style(color="#CBFFA9", bold=True),
        "quit_key": Style(color="#FF6868", bold=True),
        "description": Style(color="#5BBCFF"),
        "bracket": Style(color="#5BBCFF"),
    },
    message_styles={
        "notice": Style(color="#C780FA"),
        "success": Style(color="#CDE990"),
        "error": Style(color="#FF0000", bold=True),
        "invalid": Style(color="#FF0000"),
    },
    output_styles={
        "command": Style(color="#ACD793"),
        "output": Style(color="#5356FF"),
        "code": Style(color="#0A6847", bgcolor="#F9E8C9", bold=True),
        "code_border": Style(color="#898121"),
    },
)


# Minimal theme - no colors, emphasis only
MINIMAL_THEME = Theme(
    name="minimal",
    description="Plain text with bold emphasis only",
    menu_styles={
        "prompt": Style(bold=True),
        "key": Style(bold=True),
        "quit_key": Style(bold=True),
        "description": Style(),
        "bracket": Style(),
    },
    message_styles={
        "notice": Style(italic=True),
        "success": Style(),
        "error": Style(bold=True),
        "invalid": Style(bold=True),
    },
    output_styles={
        "command": Style(dim=True),
        "output": Style(),
        "code": Style(bold=True),
        "code_border": Style(dim=True),
    },
)


# Theme registry
THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "minimal": MINIMAL_THEME,
}

ThemeName = Literal["default", "minimal"]


def get_theme(name: ThemeName) -> Theme:
    """Get a theme by name.

    Raises:
        KeyError: If theme name is not found
    """
    if name not in THEMES:
        raise KeyError(f"Unknown theme: {name}. Available: {list(THEMES.keys())}")
    return THEMES[name]


def list_themes() -> list[str]:
    """Get list of available theme names."""
    return list(THEMES.keys())
