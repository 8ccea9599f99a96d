"""
Unit tests for header folding (folding.py).

Tests cover:
- Unfolding CRLF/LF + whitespace continuations
- Folding long values at whitespace within the line budget
- Returning the input object unchanged when nothing needs doing
"""

import pytest

from mimeutil.headers.folding import fold, unfold

SHORT_PLAIN = "abcd"

LONG_TEXT = (
    "This is a rather long subject line that will certainly not fit on a "
    "single header line once the label has been written in front of it"
)


class TestUnfold:
    """Tests for unfold() function."""

    @pytest.mark.unit
    def test_unfold_plain_returns_same_object(self):
        """Test that a value without fold points is returned as-is."""
        assert unfold(SHORT_PLAIN) is SHORT_PLAIN

    @pytest.mark.unit
    def test_unfold_crlf_space(self):
        """Test CRLF + space becomes a single space."""
        assert unfold("Re: a very\r\n long subject") == "Re: a very long subject"

    @pytest.mark.unit
    def test_unfold_crlf_tab(self):
        """Test CRLF + tab becomes a single space."""
        assert unfold("first\r\n\tsecond") == "first second"

    @pytest.mark.unit
    def test_unfold_collapses_whitespace_run(self):
        """Test CRLF followed by several WSP characters collapses to one space."""
        assert unfold("first\r\n \t  second") == "first second"

    @pytest.mark.unit
    def test_unfold_bare_lf(self):
        """Test bare LF continuations (as produced by some parsers) are unfolded."""
        assert unfold("first\n\tsecond") == "first second"

    @pytest.mark.unit
    def test_unfold_multiple_fold_points(self):
        """Test every fold point is collapsed."""
        assert unfold("a\r\n b\r\n c") == "a b c"

    @pytest.mark.unit
    def test_unfold_line_break_without_whitespace_kept(self):
        """Test a line break not followed by WSP is not a fold point."""
        value = "first\r\nsecond"
        assert unfold(value) is value

    @pytest.mark.unit
    def test_unfold_none(self):
        """Test None passes through."""
        assert unfold(None) is None


class TestFold:
    """Tests for fold() function."""

    @pytest.mark.unit
    def test_fold_short_returns_same_object(self):
        """Test that a value that fits is returned as-is."""
        assert fold(SHORT_PLAIN, 10) is SHORT_PLAIN

    @pytest.mark.unit
    def test_fold_exact_fit_returns_same_object(self):
        """Test a value filling the line exactly is not folded."""
        value = "x" * 66
        assert fold(value, 10) is value

    @pytest.mark.unit
    def test_fold_long_value_respects_budget(self):
        """Test every physical line fits in 76 characters."""
        used = len("Subject: ")
        result = fold(LONG_TEXT, used)
        lines = result.split("\r\n")

        assert len(lines) > 1
        assert used + len(lines[0]) <= 76
        for line in lines[1:]:
            assert len(line) <= 76
            assert line.startswith(" ")

    @pytest.mark.unit
    def test_fold_then_unfold_restores_value(self):
        """Test unfolding a folded value gives back the original text."""
        assert unfold(fold(LONG_TEXT, 9)) == LONG_TEXT

    @pytest.mark.unit
    def test_fold_custom_budget(self):
        """Test a smaller line budget produces more lines."""
        default_lines = fold(LONG_TEXT, 0).split("\r\n")
        narrow_lines = fold(LONG_TEXT, 0, line_budget=30).split("\r\n")

        assert len(narrow_lines) > len(default_lines)
        for line in narrow_lines:
            assert len(line) <= 30

    @pytest.mark.unit
    def test_fold_never_splits_long_word(self):
        """Test a word longer than the budget stays intact."""
        word = "x" * 100
        result = fold(f"short {word} tail", 0)

        assert word in result.split("\r\n")[1]
        assert unfold(result) == f"short {word} tail"
