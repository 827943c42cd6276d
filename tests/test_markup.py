"""Tests for markup cleanup and preprocessing."""

import pytest

from chord_sheet.sheet_parser.markup import preprocess, strip_markup


class TestStripMarkup:
    """Test tag removal."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("[ch]Am[/ch]    [ch]G[/ch]", "Am    G"),
            ("[CH]Am[/CH]", "Am"),
            ("[tab][ch]C[/ch]", "C"),
            ("la la[/tab]", "la la"),
            ("[ch]D7[/ch", "D7"),
            ("[Chorus]", "[Chorus]"),
            ("[chorus]", "[chorus]"),
            ("[Verse 1]", "[Verse 1]"),
            ("plain text", "plain text"),
        ],
    )
    def test_strip(self, line: str, expected: str) -> None:
        """Test chord and tab tags are removed and headers kept."""
        assert strip_markup(line) == expected


class TestPreprocess:
    """Test the full preprocessing pass."""

    def test_line_endings(self) -> None:
        """Test CRLF and CR line endings are normalized."""
        assert preprocess("one\r\ntwo\rthree") == ["one", "two", "three"]

    def test_html_entities(self) -> None:
        """Test HTML entities are decoded."""
        assert preprocess("rock &amp; roll, don&#39;t stop") == ["rock & roll, don't stop"]

    def test_tabs_expanded(self) -> None:
        """Test tab characters become spaces at 8-column stops."""
        assert preprocess("C\tG") == ["C       G"]

    def test_trailing_whitespace_only(self) -> None:
        """Test trailing whitespace is dropped and leading kept."""
        assert preprocess("   Am   ") == ["   Am"]

    def test_markup_keeps_columns(self) -> None:
        """Test stripping tags puts chords back over their words."""
        lines = preprocess("[ch]G[/ch]        [ch]C[/ch]\nOver the hill")
        assert lines == ["G        C", "Over the hill"]

    def test_empty(self) -> None:
        """Test empty text gives one empty line."""
        assert preprocess("") == [""]
