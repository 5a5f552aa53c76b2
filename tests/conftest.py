"""Pytest configuration and fixtures for gitwalk tests."""

import io
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Generator, Optional
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from gitwalk.config import reset_settings
from gitwalk.errors import InputAbortedError
from gitwalk.generator import CommitMessageGenerator
from gitwalk.git.repository import GitRepository
from gitwalk.git.utils import CommandResult
from gitwalk.ui.terminal import Terminal
from gitwalk.ui.theme import MINIMAL_THEME


class FakeTerminal(Terminal):
    """Terminal that replays scripted keys and lines and records output."""

    def __init__(self, keys: Iterable[str] = (), lines: Iterable[str] = ()):
        self.buffer = io.StringIO()
        super().__init__(
            console=Console(file=self.buffer, width=120, color_system=None, highlight=False),
            theme=MINIMAL_THEME,
        )
        self.keys = list(keys)
        self.lines = list(lines)
        self.menus: list[tuple[str, list[tuple[str, str]]]] = []
        self.errors: list[str] = []
        self.notices: list[str] = []
        self.invalid_count = 0

    def show_menu(self, prompt: str, options: list[tuple[str, str]]) -> None:
        self.menus.append((prompt, list(options)))
        super().show_menu(prompt, options)

    def error(self, message: str) -> None:
        self.errors.append(message)
        super().error(message)

    def notice(self, message: str) -> None:
        self.notices.append(message)
        super().notice(message)

    def invalid_input(self) -> None:
        self.invalid_count += 1
        super().invalid_input()

    def read_key(self) -> str:
        if not self.keys:
            raise InputAbortedError()
        return self.keys.pop(0)

    def read_line(self, prompt: str) -> str:
        if not self.lines:
            raise InputAbortedError()
        return self.lines.pop(0).strip()

    @property
    def output_text(self) -> str:
        return self.buffer.getvalue()

    @property
    def last_menu_keys(self) -> list[str]:
        return [key for key, _ in self.menus[-1][1]]


def ok(*args: str, stdout: str = "") -> CommandResult:
    """Successful git command result."""
    return CommandResult(command=["git", *args], returncode=0, stdout=stdout)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_terminal():
    """Factory for scripted terminals: make_terminal(keys="AQ", lines=[...])."""

    def _make(keys: Iterable[str] = (), lines: Iterable[str] = ()) -> FakeTerminal:
        return FakeTerminal(keys=keys, lines=lines)

    return _make


@pytest.fixture
def mock_repo(temp_dir: Path) -> MagicMock:
    """A repository double on branch 'main' with a single remote 'origin'."""
    repo = MagicMock(spec=GitRepository)
    repo.path = temp_dir
    repo.executable = "git"

    repo.is_inside_work_tree.return_value = True
    repo.status_lines.return_value = []
    repo.has_commits_to_push.return_value = False
    repo.current_branch.return_value = "main"
    repo.get_upstream.return_value = None
    repo.list_remotes.return_value = ["origin"]
    repo.list_branches.return_value = ["main"]

    repo.init.return_value = ok("init")
    repo.add_all.return_value = ok("add", "--all")
    repo.commit.return_value = ok("commit", "-m", "msg")
    repo.add_remote.return_value = ok("remote", "add")
    repo.fetch.return_value = ok("fetch")
    repo.merge.return_value = ok("merge", "--no-edit")
    repo.pull.return_value = ok("pull")
    repo.push.return_value = ok("push")
    repo.checkout.return_value = ok("checkout")
    repo.create_and_checkout.return_value = ok("checkout", "-b")
    repo.set_upstream.return_value = ok("branch", "--set-upstream-to")
    return repo


@pytest.fixture
def mock_generator() -> MagicMock:
    """An installed commit message generator that produces 'feat: add login'."""
    generator = MagicMock(spec=CommitMessageGenerator)
    generator.command = "aicommit"
    generator.install_hint = "https://github.com/stong1994/aicommit"
    generator.is_available.return_value = True

    def _generate(on_chunk=None):
        for chunk in ["feat: ", "add ", "login"]:
            if on_chunk:
                on_chunk(chunk)
        return "feat: add login"

    generator.generate.side_effect = _generate
    return generator


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
git:
  executable: git
  timeout: 30

generator:
  command: my-commit-writer
  args: ["--short"]

flow:
  auto_upstream: true
  page_size: 5

ui:
  theme: minimal
"""
    )
    return config_path


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Clean gitwalk environment variables for testing."""
    original: dict[str, Optional[str]] = {}
    for var in list(os.environ):
        if var.startswith("GITWALK_"):
            original[var] = os.environ.pop(var)

    reset_settings()

    yield

    for var in list(os.environ):
        if var.startswith("GITWALK_"):
            del os.environ[var]
    for var, value in original.items():
        if value is not None:
            os.environ[var] = value

    reset_settings()
