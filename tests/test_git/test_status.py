"""Tests for status parsing and repository state classification."""

import pytest

from gitwalk.errors import ParseError, StatusParseError
from gitwalk.git.status import (
    RepoState,
    StatusLine,
    classify,
    parse_status_line,
    parse_status_output,
)


class TestParseStatusLine:
    """Tests for parse_status_line."""

    def test_parse_modified_worktree(self):
        """Test a file modified in the worktree only."""
        line = parse_status_line(" M src/app.py")
        assert line.index == " "
        assert line.worktree == "M"
        assert line.path == "src/app.py"
        assert line.is_unstaged is True
        assert line.is_staged is False

    def test_parse_staged_addition(self):
        """Test a newly added file."""
        line = parse_status_line("A  new.py")
        assert line.is_staged is True
        assert line.is_unstaged is False

    def test_parse_untracked(self):
        """Test untracked files count as unstaged."""
        line = parse_status_line("?? notes.txt")
        assert line.code == "??"
        assert line.is_unstaged is True
        assert line.is_staged is False

    def test_parse_ignored(self):
        """Test ignored files count as unstaged."""
        line = parse_status_line("!! build/")
        assert line.is_unstaged is True

    def test_parse_rename_keeps_new_path(self):
        """Test renames report the destination path."""
        line = parse_status_line("R  old.py -> new.py")
        assert line.path == "new.py"
        assert line.is_staged is True

    def test_parse_staged_and_modified(self):
        """Test a file with both staged and unstaged changes."""
        line = parse_status_line("MM both.py")
        assert line.is_staged is True
        assert line.is_unstaged is True

    def test_parse_path_with_spaces(self):
        """Test paths may contain spaces."""
        line = parse_status_line(" M my file.txt")
        assert line.path == "my file.txt"

    @pytest.mark.parametrize("code", ["UU", "AA", "DD", "AU", "UA", "DU", "UD"])
    def test_conflict_codes_need_resolve(self, code):
        """Test every unmerged pair is a conflict."""
        line = parse_status_line(f"{code} conflicted.py")
        assert line.needs_resolve is True

    def test_unknown_code_raises(self):
        """Test an unrecognized code is a parse error."""
        with pytest.raises(ParseError) as exc_info:
            parse_status_line("XY path")

        assert exc_info.value.line == "XY path"
        assert "XY path" in str(exc_info.value)

    @pytest.mark.parametrize("line", ["?M file", "M? file", "!  file", " ! file"])
    def test_unpaired_markers_raise(self, line):
        """Test '?' and '!' are only valid as '??' and '!!'."""
        with pytest.raises(StatusParseError):
            parse_status_line(line)

    def test_blank_code_raises(self):
        """Test a code of two blanks is not a status."""
        with pytest.raises(StatusParseError):
            parse_status_line("   file")

    @pytest.mark.parametrize("line", ["M", " M", "MMfile", "M "])
    def test_malformed_line_raises(self, line):
        """Test lines without a code, separator and path."""
        with pytest.raises(StatusParseError):
            parse_status_line(line)

    def test_status_line_validates_directly(self):
        """Test StatusLine rejects unknown codes on construction."""
        with pytest.raises(StatusParseError):
            StatusLine(index="X", worktree="Y", path="path")


class TestParseStatusOutput:
    """Tests for parse_status_output."""

    def test_parse_empty_output(self):
        """Test empty output means no changes."""
        assert parse_status_output("") == []

    def test_parse_multiple_lines(self):
        """Test a full report."""
        output = "M  staged.py\n M changed.py\n?? new.txt\n"
        lines = parse_status_output(output)
        assert [line.path for line in lines] == ["staged.py", "changed.py", "new.txt"]

    def test_blank_lines_skipped(self):
        """Test blank lines between entries are ignored."""
        lines = parse_status_output("\n M a.py\n\n")
        assert len(lines) == 1

    def test_bad_line_fails_whole_report(self):
        """Test a single unknown code fails the report."""
        with pytest.raises(StatusParseError):
            parse_status_output(" M a.py\nZZ b.py\n")


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize(
        "has_commits_to_push,lines,expected",
        [
            (False, [], RepoState.CLEAN),
            (False, [" M a.py"], RepoState.UNSTAGED),
            (False, ["M  a.py"], RepoState.FULLY_STAGED),
            (False, ["M  a.py", " M b.py"], RepoState.PARTIALLY_STAGED),
            (True, [], RepoState.FULLY_COMMITTED),
            (True, [" M a.py"], RepoState.PARTIALLY_COMMITTED),
            (True, ["M  a.py"], RepoState.MESS_FULLY_COMMITTED),
            (True, ["MM a.py"], RepoState.MESS_PARTIALLY_COMMITTED),
        ],
    )
    def test_state_table(self, has_commits_to_push, lines, expected):
        """Test every combination of push pending, staged and unstaged."""
        assert classify(lines, has_commits_to_push) == expected

    def test_empty_is_clean(self):
        """Test no status lines and nothing to push is clean."""
        assert classify([], False) == RepoState.CLEAN

    @pytest.mark.parametrize("has_commits_to_push", [False, True])
    def test_conflict_overrides(self, has_commits_to_push):
        """Test any conflict line forces the conflicted state."""
        lines = ["M  a.py", " M b.py", "UU c.py", "?? d.txt"]
        assert classify(lines, has_commits_to_push) == RepoState.CONFLICTED

    def test_both_added_conflict(self):
        """Test AA is a conflict."""
        assert classify(["AA both.py"], False) == RepoState.CONFLICTED

    def test_untracked_only_is_unstaged(self):
        """Test untracked files alone are unstaged changes."""
        assert classify(["?? new.txt"], False) == RepoState.UNSTAGED

    def test_accepts_parsed_lines(self):
        """Test StatusLine objects and raw lines classify the same."""
        raw = ["M  a.py", " D b.py"]
        parsed = [parse_status_line(line) for line in raw]
        assert classify(parsed, False) == classify(raw, False)

    def test_unknown_code_raises(self):
        """Test classification refuses to guess."""
        with pytest.raises(ParseError):
            classify(["XY path"], False)

    def test_idempotent(self):
        """Test repeated classification of the same input is stable."""
        lines = ["MM a.py", "?? b.txt"]
        first = classify(lines, True)
        assert all(classify(lines, True) == first for _ in range(5))

    def test_order_does_not_matter(self):
        """Test classification ignores line order."""
        lines = [" M a.py", "A  b.py", "?? c.txt"]
        assert classify(lines, False) == classify(list(reversed(lines)), False)
