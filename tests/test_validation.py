"""Tests for sheet-level chord validation."""

from pathlib import Path

import pytest

from chord_sheet.models import Chord, SpecialChord, UnparsedChord
from chord_sheet.serialization import loads
from chord_sheet.sheet_parser.models import ChordSheet, Line, Section, Word
from chord_sheet.validation import (
    ChordError,
    map_chords,
    normalize_sheet,
    sheet_chord_errors,
    strict_chord,
    validate_sheet_strict,
)

TESTDATA_DIR = Path(__file__).parent.parent / "testdata"


@pytest.fixture
def legacy_sheet() -> ChordSheet:
    """Load the legacy fixture, which holds unparsed chord strings."""
    return loads((TESTDATA_DIR / "legacy_sheet.json").read_text(encoding="utf-8"))


def sheet_of(*words: Word) -> ChordSheet:
    """Wrap words in a one-line, one-section sheet."""
    return ChordSheet(sections=(Section("section-1", "verse", "Verse", (Line(words=words),)),))


class TestStrictChord:
    """Test the strict chord filter."""

    def test_unparsed_valid_becomes_structured(self) -> None:
        """Test valid raw strings are parsed."""
        assert strict_chord(UnparsedChord("Am7")) == Chord(note="A", quality="minor", extension=7)

    def test_unparsed_invalid_removed(self) -> None:
        """Test invalid raw strings are rejected."""
        assert strict_chord(UnparsedChord("Hm7")) is None
        assert strict_chord(UnparsedChord("Cminor")) is None

    def test_structured_out_of_range_removed(self) -> None:
        """Test structured chords outside the allowed numbers are rejected."""
        assert strict_chord(Chord(note="C", extension=8)) is None
        assert strict_chord(Chord(note="C", add=3)) is None

    def test_valid_kept(self) -> None:
        """Test valid structured chords and markers pass through."""
        chord = Chord(note="D", inversion="F", inversion_accidental="#")
        assert strict_chord(chord) is chord
        assert strict_chord(SpecialChord(marker="x")) == SpecialChord(marker="x")


class TestMapChords:
    """Test the sheet-wide chord map."""

    def test_input_unchanged(self) -> None:
        """Test mapping returns a new sheet."""
        sheet = sheet_of(Word("la", UnparsedChord("Hm")))
        mapped = map_chords(sheet, lambda chord: None)
        assert sheet.lines[0].words[0].chord == UnparsedChord("Hm")
        assert mapped.lines[0].words[0].chord is None

    def test_empty_words_and_lines_pruned(self) -> None:
        """Test words left with neither text nor chord are removed."""
        sheet = sheet_of(Word("", UnparsedChord("Hm")), Word("", UnparsedChord("Xq")))
        assert validate_sheet_strict(sheet).sections[0].lines == ()

    def test_mapper_sees_only_chords(self) -> None:
        """Test chord-free words are not passed to the mapper."""
        seen = []
        sheet = sheet_of(Word("la"), Word("da", Chord(note="G")))
        map_chords(sheet, lambda chord: seen.append(chord) or chord)
        assert seen == [Chord(note="G")]


class TestValidateSheet:
    """Test whole-sheet passes."""

    def test_strict(self, legacy_sheet: ChordSheet) -> None:
        """Test the strict pass parses valid strings and drops invalid ones."""
        sheet = validate_sheet_strict(legacy_sheet)
        verse, chorus = sheet.sections
        assert verse.lines[0].words[0].chord == Chord(note="G")
        assert verse.lines[0].words[2].chord == Chord(note="D", extension=7, explicit_maj=True)
        assert [str(w.chord) if w.chord else None for w in chorus.lines[0].words] == [
            "C",
            None,
            "N.C.",
        ]

    def test_normalize(self) -> None:
        """Test the lenient pass repairs what it can and keeps the rest."""
        sheet = normalize_sheet(
            sheet_of(Word("a", UnparsedChord("Amin7")), Word("b", UnparsedChord("Hm7")))
        )
        chords = [w.chord for w in sheet.lines[0].words]
        assert chords == [Chord(note="A", quality="minor", extension=7), UnparsedChord("Hm7")]

    def test_errors(self, legacy_sheet: ChordSheet) -> None:
        """Test errors name the slot of every rejected chord."""
        assert sheet_chord_errors(legacy_sheet) == [
            ChordError(
                section_id="section-2",
                line=0,
                word=1,
                chord="Hm7",
                messages=('Invalid chord format: "Hm7"',),
            )
        ]

    def test_no_errors(self) -> None:
        """Test a clean sheet reports nothing."""
        sheet = sheet_of(Word("la", Chord(note="C")), Word("", SpecialChord(marker="N.C.")))
        assert sheet_chord_errors(sheet) == []

    def test_structured_error(self) -> None:
        """Test a structured chord with a bad extension is reported."""
        errors = sheet_chord_errors(sheet_of(Word("la", Chord(note="C", extension=8))))
        assert errors[0].chord == "C8"
        assert errors[0].messages[0].startswith("Invalid extension: 8")
