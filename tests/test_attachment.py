"""Tests for chord-to-word attachment."""

import numpy as np
import pytest

from chord_sheet.models import SpecialChord
from chord_sheet.sheet_parser.attachment import (
    LTR_WEIGHTS,
    RTL_WEIGHTS,
    align,
    align_by_index,
    chord_only_line,
    chord_tokens,
    lyric_only_line,
    score_pairs,
)
from chord_sheet.sheet_parser.models import Word


def pairs(words: list[Word]) -> list[tuple[str, str | None]]:
    """Flatten words to (text, chord) for comparison."""
    return [(w.text, str(w.chord) if w.chord is not None else None) for w in words]


class TestChordTokens:
    """Test chord token extraction."""

    def test_non_chords_skipped(self) -> None:
        """Test bar lines and words are not chord tokens."""
        assert [(t.text, t.start) for t in chord_tokens("Am  |  G  (x2)")] == [("Am", 0), ("G", 7)]

    def test_strict(self) -> None:
        """Test the strict parser rejects repairs."""
        assert chord_tokens("Cminor", lenient=False) == []
        assert str(chord_tokens("Cminor")[0].chord) == "Cm"


class TestScorePairs:
    """Test the pair scoring matrix."""

    def test_shape(self) -> None:
        """Test one row per word and one column per chord."""
        words = (np.array([0.0, 0.5]), np.array([0.25, 1.0]))
        chords = (np.array([0.0, 0.5, 0.75]), np.array([0.25, 0.625, 1.0]))
        score, accepted = score_pairs(words, chords, LTR_WEIGHTS)
        assert score.shape == (2, 3)
        assert accepted.shape == (2, 3)

    def test_full_overlap_accepted(self) -> None:
        """Test a chord inside a word is accepted with a high score."""
        words = (np.array([0.0]), np.array([0.5]))
        chords = (np.array([0.0]), np.array([0.25]))
        score, accepted = score_pairs(words, chords, LTR_WEIGHTS)
        assert accepted[0, 0]
        assert score[0, 0] == pytest.approx(3.0 + 1 / (1 + 0.125 * 20))

    def test_rtl_thresholds_are_stricter(self) -> None:
        """Test a half overlap is accepted left-to-right but not right-to-left."""
        words = (np.array([0.0]), np.array([0.5]))
        chords = (np.array([0.25]), np.array([0.75]))
        _, ltr = score_pairs(words, chords, LTR_WEIGHTS)
        _, rtl = score_pairs(words, chords, RTL_WEIGHTS)
        assert ltr[0, 0]
        assert not rtl[0, 0]

    def test_distant_pair_rejected(self) -> None:
        """Test a far chord with no overlap is rejected."""
        words = (np.array([0.0]), np.array([0.2]))
        chords = (np.array([0.8]), np.array([1.0]))
        _, accepted = score_pairs(words, chords, LTR_WEIGHTS)
        assert not accepted[0, 0]


class TestAlign:
    """Test proportional alignment."""

    def test_one_chord_per_word(self) -> None:
        """Test evenly spread chords land on their words."""
        words = align("C       Am      F", "Hello   my      friend")
        assert pairs(words) == [("Hello", "C"), ("my", "Am"), ("friend", "F")]

    def test_drifted_columns(self) -> None:
        """Test alignment is insensitive to OCR column drift."""
        words = align("Am     G", "Rain  falls  down")
        assert pairs(words) == [("Rain", "Am"), ("falls", None), ("down", "G")]

    def test_extra_chords_dropped(self) -> None:
        """Test each word holds at most one chord and each chord one word."""
        words = align("C G Am F", "hey")
        assert pairs(words) == [("hey", "Am")]

    def test_every_word_returned(self) -> None:
        """Test the output has one entry per lyric word."""
        words = align("G", "one two three four five")
        assert [w.text for w in words] == ["one", "two", "three", "four", "five"]
        assert sum(w.chord is not None for w in words) == 1

    def test_no_chords(self) -> None:
        """Test a line without chords leaves every word bare."""
        assert pairs(align("| |", "hello world")) == [("hello", None), ("world", None)]

    def test_empty_lyric(self) -> None:
        """Test an empty lyric line gives no words."""
        assert align("C G", "") == []

    def test_special_chord(self) -> None:
        """Test special markers are attached like chords."""
        words = align("N.C.", "silence")
        assert words[0].chord == SpecialChord(marker="N.C.")

    def test_rtl(self) -> None:
        """Test right-to-left lyrics are aligned with the stricter weights."""
        words = align("Am      G", "שלום עולם")
        assert pairs(words) == [("שלום", "Am"), ("עולם", "G")]


class TestAlignByIndex:
    """Test column alignment."""

    def test_columns(self) -> None:
        """Test chords land on the words under them."""
        words = align_by_index("G        C", "Over the hill")
        assert pairs(words) == [("Over", "G"), ("the", None), ("hill", "C")]

    def test_second_chord_moves_on(self) -> None:
        """Test a chord over an occupied word moves to the next word."""
        words = align_by_index("C G", "Wonderful day")
        assert pairs(words) == [("Wonderful", "C"), ("day", "G")]

    def test_leftover_chords_dropped(self) -> None:
        """Test chords with no word left are dropped."""
        words = align_by_index("C  G  Am  F", "hey you")
        assert pairs(words) == [("hey", "C"), ("you", "G")]

    @pytest.mark.parametrize(("window", "word"), [(2, "love"), (1, "la")])
    def test_window(self, window: int, word: str) -> None:
        """Test the drift window decides which word a chord belongs to."""
        words = align_by_index("   G", "la   love", window=window)
        assert [w.text for w in words if w.chord is not None] == [word]

    def test_mid_word_chord(self) -> None:
        """Test a chord over the middle of a word stays on that word."""
        words = align_by_index("    D", "Carrying home")
        assert pairs(words) == [("Carrying", "D"), ("home", None)]

    def test_no_words(self) -> None:
        """Test a chord line over an empty lyric gives no words."""
        assert align_by_index("C G", "") == []


class TestSingleSidedLines:
    """Test lines with only chords or only lyrics."""

    def test_chord_only(self) -> None:
        """Test an instrumental line gives empty-text words."""
        line = chord_only_line("Am   G   F   x")
        assert pairs(list(line.words)) == [("", "Am"), ("", "G"), ("", "F"), ("", "x")]
        assert line.lyrics == ""

    def test_lyric_only(self) -> None:
        """Test a lyric line gives chord-free words."""
        line = lyric_only_line("  over the hill ")
        assert pairs(list(line.words)) == [("over", None), ("the", None), ("hill", None)]
        assert line.chords == ()
