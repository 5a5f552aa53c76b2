"""Terminal input and output for the interactive flow.

Output goes through a rich Console. Input comes from prompt_toolkit: a
single raw keypress for menus and a full edited line for free text. Raw
keyboard mode is only held while one keypress is being read; the
prompt_toolkit application restores the terminal on every exit path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from gitwalk.errors import InputAbortedError
from gitwalk.ui.theme import DEFAULT_THEME, Theme

if TYPE_CHECKING:
    from gitwalk.git.utils import CommandResult

logger = logging.getLogger(__name__)

QUIT_KEY = "Q"
KEY_PROMPT = "Press a key: "


class Terminal:
    """Styled output plus keypress and line input."""

    def __init__(self, console: Optional[Console] = None, theme: Theme = DEFAULT_THEME):
        self.console = console or Console(highlight=False)
        self.theme = theme

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def show_menu(self, prompt: str, options: list[tuple[str, str]]) -> None:
        """Render a prompt and its options, quit option last.

        Args:
            prompt: Question shown above the options
            options: (key, description) pairs, without the quit option
        """
        self.console.print()
        self.console.print(Text(f"==> {prompt}", style=self.theme.get_menu_style("prompt")))
        self.console.print()
        for key, description in options:
            self._print_option(key, description, "key")
        self._print_option(QUIT_KEY, "Quit", "quit_key")

    def _print_option(self, key: str, description: str, key_style: str) -> None:
        bracket = self.theme.get_menu_style("bracket")
        self.console.print(
            Text.assemble(
                ("\t- [", bracket),
                (key, self.theme.get_menu_style(key_style)),
                ("]: ", bracket),
                (description, self.theme.get_menu_style("description")),
            )
        )

    def notice(self, message: str) -> None:
        self.console.print(Text(message, style=self.theme.get_message_style("notice")))

    def success(self, message: str) -> None:
        self.console.print(Text(message, style=self.theme.get_message_style("success")))

    def error(self, message: str) -> None:
        self.console.print(Text(message, style=self.theme.get_message_style("error")))

    def invalid_input(self) -> None:
        self.console.print(
            Text("Invalid option, please try again.", style=self.theme.get_message_style("invalid"))
        )

    def command(self, command_line: str) -> None:
        """Announce an external command before it runs."""
        self.console.print()
        self.console.print(
            Text(f"==> Executing command: {command_line}", style=self.theme.get_output_style("command"))
        )

    def output(self, text: str) -> None:
        """Show captured output of an external command."""
        text = text.rstrip()
        if text:
            self.console.print(Text(text, style=self.theme.get_output_style("output")))

    def report(self, result: "CommandResult") -> None:
        """Show the output of a finished command and whether it succeeded.

        Stderr of a failed command is shown verbatim.
        """
        self.output(result.stdout)
        if result.success:
            self.success(f"Done: {result.command_line}")
        else:
            self.error(f"Command failed: {result.command_line}")
            self.error(result.error_text)

    def stream_start(self, title: str) -> None:
        self.console.print(Rule(title, style=self.theme.get_output_style("code_border")))

    def stream_chunk(self, chunk: str) -> None:
        """Print part of a streamed message without a line break."""
        self.console.print(Text(chunk, style=self.theme.get_output_style("code")), end="")

    def stream_end(self, title: str) -> None:
        self.console.print()
        self.console.print(Rule(title, style=self.theme.get_output_style("code_border")))

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def read_key(self) -> str:
        """Block until a single key is pressed and return its character data.

        Raises:
            InputAbortedError: On Ctrl-C or Ctrl-D.
        """
        bindings = KeyBindings()

        @bindings.add("c-c")
        @bindings.add("c-d")
        def _abort(event) -> None:
            event.app.exit(result=None)

        @bindings.add(Keys.Any)
        def _key(event) -> None:
            event.app.exit(result=event.data)

        app: Application = Application(
            layout=Layout(Window(FormattedTextControl(KEY_PROMPT), height=1)),
            key_bindings=bindings,
            full_screen=False,
            erase_when_done=True,
        )
        key = app.run()
        if key is None:
            raise InputAbortedError()

        logger.debug(f"Key pressed: {key!r}")
        return key

    def read_line(self, prompt: str) -> str:
        """Read a full line of text in normal line-editing mode.

        Raises:
            InputAbortedError: On Ctrl-C or end of input.
        """
        self.console.print(Text(prompt, style=self.theme.get_menu_style("prompt")))
        session: PromptSession = PromptSession()
        try:
            return session.prompt("> ").strip()
        except (EOFError, KeyboardInterrupt):
            raise InputAbortedError() from None
