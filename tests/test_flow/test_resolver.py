"""Tests for push/pull target resolution."""

import pytest

from gitwalk.errors import QuitRequested
from gitwalk.flow.dispatcher import ActionDispatcher
from gitwalk.flow.menu import MenuEngine
from gitwalk.git.repository import RemoteBranch


@pytest.fixture
def build_resolver(mock_repo, mock_generator, make_terminal):
    """Factory for a resolver wired to a dispatcher and scripted terminal."""

    def _build(keys="", lines=()):
        terminal = make_terminal(keys=keys, lines=lines)
        dispatcher = ActionDispatcher(mock_repo, terminal, MenuEngine(terminal), mock_generator)
        return dispatcher.resolver, terminal

    return _build


class TestConfiguredUpstream:
    """Tests for an existing tracking branch."""

    def test_confirm_upstream(self, mock_repo, build_resolver):
        """Test confirming returns the upstream unchanged."""
        mock_repo.get_upstream.return_value = RemoteBranch("origin", "feature/x")
        resolver, terminal = build_resolver(keys="y")

        assert resolver.resolve() == RemoteBranch("origin", "feature/x")
        assert terminal.last_menu_keys == ["Y", "O"]
        mock_repo.list_remotes.assert_not_called()

    def test_override_upstream(self, mock_repo, build_resolver):
        """Test declining falls through to remote and branch selection."""
        mock_repo.get_upstream.return_value = RemoteBranch("origin", "old")
        mock_repo.list_branches.return_value = ["main", "dev"]
        resolver, terminal = build_resolver(keys="OY")

        assert resolver.resolve() == RemoteBranch("origin", "main")

    def test_quit_raises(self, mock_repo, build_resolver):
        """Test quitting the confirmation."""
        mock_repo.get_upstream.return_value = RemoteBranch("origin", "main")
        resolver, _ = build_resolver(keys="q")

        with pytest.raises(QuitRequested):
            resolver.resolve()


class TestZeroRemotes:
    """Tests for repositories without a remote."""

    def test_add_remote_before_branch_selection(self, mock_repo, build_resolver):
        """Test a remote is added and fetched before any branch is chosen."""
        mock_repo.list_remotes.return_value = []
        mock_repo.list_branches.return_value = ["main"]
        resolver, terminal = build_resolver(
            keys="YY", lines=["origin", "git@example.com:me/repo.git"]
        )

        target = resolver.resolve()

        assert target == RemoteBranch("origin", "main")
        mock_repo.add_remote.assert_called_once_with("origin", "git@example.com:me/repo.git")
        mock_repo.fetch.assert_called_once_with("origin")
        mock_repo.list_branches.assert_called_with("origin")

        prompts = [prompt for prompt, _ in terminal.menus]
        assert prompts[0] == "No remote found, add one?"
        assert prompts[1] == "Found origin/main, use it?"
        assert any("Fetching origin" in notice for notice in terminal.notices)

    def test_decline_adding_remote(self, mock_repo, build_resolver):
        """Test declining leaves no target."""
        mock_repo.list_remotes.return_value = []
        resolver, _ = build_resolver(keys="S")

        assert resolver.resolve() is None
        mock_repo.add_remote.assert_not_called()
        mock_repo.fetch.assert_not_called()

    def test_add_remote_failure(self, mock_repo, build_resolver):
        """Test a failed 'remote add' is reported and leaves no target."""
        from gitwalk.git.utils import CommandResult

        mock_repo.list_remotes.return_value = []
        mock_repo.add_remote.return_value = CommandResult(
            ["git", "remote", "add", "origin", "x"], 3, stderr="error: remote origin already exists."
        )
        resolver, terminal = build_resolver(keys="Y", lines=["origin", "x"])

        assert resolver.resolve() is None
        assert "error: remote origin already exists." in terminal.errors
        mock_repo.fetch.assert_not_called()


class TestSingleRemote:
    """Tests for a repository with one remote."""

    def test_matching_branch_offered_alone(self, mock_repo, build_resolver):
        """Test the same-named branch is the single confirm choice."""
        mock_repo.list_branches.return_value = ["dev", "main", "release"]
        resolver, terminal = build_resolver(keys="Y")

        assert resolver.resolve() == RemoteBranch("origin", "main")
        assert terminal.last_menu_keys == ["Y", "M"]
        mock_repo.fetch.assert_not_called()

    def test_manual_branch_name(self, mock_repo, build_resolver):
        """Test typing a branch name instead."""
        resolver, _ = build_resolver(keys="M", lines=["feature/login"])
        assert resolver.resolve() == RemoteBranch("origin", "feature/login")

    def test_empty_manual_name_asks_again(self, mock_repo, build_resolver):
        """Test an empty branch name returns to the branch menu."""
        resolver, terminal = build_resolver(keys="MY", lines=[""])

        assert resolver.resolve() == RemoteBranch("origin", "main")
        assert "Branch name cannot be empty." in terminal.errors
        assert len(terminal.menus) == 2

    def test_no_matching_branch_lists_all(self, mock_repo, build_resolver):
        """Test branches are listed when none matches the local name."""
        mock_repo.current_branch.return_value = "feature/new"
        mock_repo.list_branches.return_value = ["main", "dev"]
        resolver, terminal = build_resolver(keys="2")

        assert resolver.resolve() == RemoteBranch("origin", "dev")
        assert terminal.last_menu_keys == ["1", "2", "M", "L"]

    def test_use_local_branch_name(self, mock_repo, build_resolver):
        """Test pushing to a new branch named like the local one."""
        mock_repo.current_branch.return_value = "feature/new"
        mock_repo.list_branches.return_value = ["main"]
        resolver, _ = build_resolver(keys="L")

        assert resolver.resolve() == RemoteBranch("origin", "feature/new")


class TestManyRemotes:
    """Tests for repositories with several remotes."""

    def test_indexed_remote_selection(self, mock_repo, build_resolver):
        """Test remotes are chosen by position."""
        mock_repo.list_remotes.return_value = ["origin", "upstream"]
        mock_repo.list_branches.return_value = ["main"]
        resolver, terminal = build_resolver(keys="2Y")

        assert resolver.resolve() == RemoteBranch("upstream", "main")
        assert terminal.menus[0][1] == [("1", "origin"), ("2", "upstream")]
        mock_repo.list_branches.assert_called_with("upstream")

    def test_quit_remote_selection(self, mock_repo, build_resolver):
        """Test quitting inside the remote list."""
        mock_repo.list_remotes.return_value = ["origin", "upstream"]
        resolver, _ = build_resolver(keys="Q")

        with pytest.raises(QuitRequested):
            resolver.resolve()


class TestAutoUpstream:
    """Tests for non-interactive resolution."""

    def test_uses_configured_upstream(self, mock_repo, build_resolver):
        """Test the tracking branch wins."""
        mock_repo.get_upstream.return_value = RemoteBranch("origin", "dev")
        resolver, terminal = build_resolver()

        assert resolver.resolve(auto=True) == RemoteBranch("origin", "dev")
        assert terminal.menus == []

    def test_first_remote_with_same_branch(self, mock_repo, build_resolver):
        """Test remotes are searched in order for the local branch name."""
        mock_repo.list_remotes.return_value = ["fork", "origin", "upstream"]
        mock_repo.list_branches.side_effect = lambda remote=None: {
            "fork": ["dev"],
            "origin": ["main"],
            "upstream": ["main"],
        }[remote]
        resolver, terminal = build_resolver()

        assert resolver.resolve(auto=True) == RemoteBranch("origin", "main")
        assert terminal.menus == []

    def test_nothing_found(self, mock_repo, build_resolver):
        """Test no match gives no target without prompting."""
        mock_repo.list_branches.return_value = ["dev"]
        resolver, terminal = build_resolver()

        assert resolver.resolve(auto=True) is None
        assert terminal.menus == []
        mock_repo.fetch.assert_not_called()

    def test_detached_head(self, mock_repo, build_resolver):
        """Test a detached HEAD has nothing to match."""
        mock_repo.current_branch.return_value = None
        resolver, _ = build_resolver()

        assert resolver.resolve(auto=True) is None
