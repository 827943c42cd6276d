"""Tests for the chord grammar."""

import pytest

from chord_sheet.grammar import (
    chord_validation_errors,
    is_chord,
    parse_chord,
    parse_chord_lenient,
    repair_chord_text,
    serialize_chord,
)
from chord_sheet.models import Chord, SpecialChord, UnparsedChord


class TestParseChord:
    """Test the strict parser."""

    def test_major_triad(self) -> None:
        """Test a bare root parses as a major triad."""
        assert parse_chord("C") == Chord(note="C")

    def test_minor_seventh(self) -> None:
        """Test minor quality with an extension."""
        chord = parse_chord("Am7")
        assert isinstance(chord, Chord)
        assert chord.quality == "minor"
        assert chord.extension == 7
        assert chord.explicit_maj is False

    def test_flat_root(self) -> None:
        """Test a 'b' after the root is a flat."""
        chord = parse_chord("Bbm")
        assert isinstance(chord, Chord)
        assert chord.root == "Bb"
        assert chord.quality == "minor"

    def test_unicode_accidentals(self) -> None:
        """Test Unicode sharp and flat glyphs."""
        assert parse_chord("F♯m") == Chord(note="F", accidental="#", quality="minor")
        assert parse_chord("B♭") == Chord(note="B", accidental="b")

    @pytest.mark.parametrize(
        ("text", "quality", "extension"),
        [
            ("Cdim", "dim", None),
            ("Bdim7", "dim", 7),
            ("Caug", "aug", None),
            ("Dsus2", "sus2", None),
            ("Dsus4", "sus4", None),
            ("Dsus", "sus4", None),
            ("Amin7", "minor", 7),
            ("E9", "major", 9),
            ("C5", "major", 5),
        ],
    )
    def test_qualities(self, text: str, quality: str, extension: int | None) -> None:
        """Test each quality marker."""
        chord = parse_chord(text)
        assert isinstance(chord, Chord)
        assert chord.quality == quality
        assert chord.extension == extension

    @pytest.mark.parametrize("text", ["Cmaj7", "CM7", "CMaj7"])
    def test_explicit_major_seventh(self, text: str) -> None:
        """Test the spellings of a major seventh."""
        chord = parse_chord(text)
        assert chord == Chord(note="C", extension=7, explicit_maj=True)

    @pytest.mark.parametrize("text", ["Cmmaj7", "CmM7", "Cminmaj7"])
    def test_minor_major(self, text: str) -> None:
        """Test minor-major spellings."""
        chord = parse_chord(text)
        assert chord == Chord(note="C", quality="minor", extension=7, explicit_maj=True)

    def test_maj_without_extension_is_plain_major(self) -> None:
        """Test 'maj' with no extension normalizes to a plain major chord."""
        assert parse_chord("Cmaj") == Chord(note="C")

    def test_add(self) -> None:
        """Test an added tone."""
        chord = parse_chord("Cadd9")
        assert isinstance(chord, Chord)
        assert chord.add == 9
        assert chord.extension is None

    def test_inversion(self) -> None:
        """Test a slash chord."""
        chord = parse_chord("Am/G")
        assert isinstance(chord, Chord)
        assert chord.inversion == "G"
        assert chord.bass == "G"

    def test_inversion_accidental_dropped(self) -> None:
        """Test only the bass letter is kept when parsing."""
        chord = parse_chord("D/F#")
        assert isinstance(chord, Chord)
        assert chord.inversion == "F"
        assert chord.inversion_accidental is None

    @pytest.mark.parametrize("text", ["N.C.", "NC", "n.c.", "N.C"])
    def test_no_chord(self, text: str) -> None:
        """Test no-chord markers."""
        assert parse_chord(text) == SpecialChord(marker="N.C.")

    @pytest.mark.parametrize("text", ["x", "X"])
    def test_muted(self, text: str) -> None:
        """Test muted markers."""
        assert parse_chord(text) == SpecialChord(marker="x")

    def test_surrounding_whitespace(self) -> None:
        """Test whitespace around a chord is ignored."""
        assert parse_chord("  G7 ") == Chord(note="G", extension=7)

    @pytest.mark.parametrize(
        "text",
        [None, "", "   ", "H", "c", "Hello", "the", "C8", "Cadd12", "Cadd3", "Am7?", "C/H"],
    )
    def test_rejected(self, text: str | None) -> None:
        """Test strings the grammar rejects."""
        assert parse_chord(text) is None

    def test_too_long(self) -> None:
        """Test over-long strings are rejected."""
        assert parse_chord("C" + "add9" * 4) is None


class TestLenient:
    """Test the lenient repair pass."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Cminor", "Cm"),
            ("A minor", "Am"),
            ("G#di", "G#dim"),
            ("Csharp", "C#"),
            ("Bflat7", "Bb7"),
            ("Ebmajor7", "Ebmaj7"),
            ("Cdiminished", "Cdim"),
            ("Caugmented", "Caug"),
            ("E7sus4", "Esus47"),
        ],
    )
    def test_repairs(self, text: str, expected: str) -> None:
        """Test common OCR and typing variants are repaired."""
        assert parse_chord(text) is None
        assert serialize_chord(parse_chord_lenient(text)) == expected

    def test_strict_input_unchanged(self) -> None:
        """Test valid chords parse the same on both paths."""
        assert parse_chord_lenient("F#m7") == parse_chord("F#m7")

    def test_unrepairable(self) -> None:
        """Test text that stays invalid after repair."""
        assert parse_chord_lenient("Hello") is None
        assert parse_chord_lenient(None) is None

    def test_repair_text(self) -> None:
        """Test the raw repair rewrite."""
        assert repair_chord_text(" C  minor ") == "Cm"

    def test_is_chord(self) -> None:
        """Test the strict and lenient membership check."""
        assert is_chord("Gm7")
        assert not is_chord("Gminor")
        assert is_chord("Gminor", lenient=True)
        assert not is_chord("walking", lenient=True)


class TestSerializeChord:
    """Test canonical serialization."""

    @pytest.mark.parametrize(
        "text",
        [
            "C",
            "Am7",
            "Cmaj7",
            "Cmmaj7",
            "F#dim7",
            "Bbaug",
            "Gsus2",
            "Dsus47",
            "Cadd9",
            "Am/G",
            "Ebm11",
            "A13",
            "C6",
            "Am6add9",
            "N.C.",
            "x",
        ],
    )
    def test_canonical_strings_are_fixed_points(self, text: str) -> None:
        """Test canonical spellings serialize back to themselves."""
        assert serialize_chord(parse_chord(text)) == text

    @pytest.mark.parametrize(
        ("text", "canonical"),
        [
            ("Amin7", "Am7"),
            ("CM7", "Cmaj7"),
            ("CmM7", "Cmmaj7"),
            ("Dsus", "Dsus4"),
            ("Cmaj", "C"),
            ("n.c.", "N.C."),
            ("B♭m", "Bbm"),
        ],
    )
    def test_canonicalization(self, text: str, canonical: str) -> None:
        """Test non-canonical spellings and idempotence."""
        chord = parse_chord(text)
        assert serialize_chord(chord) == canonical
        assert parse_chord(serialize_chord(chord)) == chord

    def test_transposed_bass_accidental(self) -> None:
        """Test a bass accidental set by transposition is written."""
        chord = Chord(note="C", inversion="G", inversion_accidental="#")
        assert serialize_chord(chord) == "C/G#"

    def test_explicit_maj_needs_extension(self) -> None:
        """Test explicit major is not written without an extension."""
        assert serialize_chord(Chord(note="C", explicit_maj=True)) == "C"

    def test_unparsed_and_none(self) -> None:
        """Test unparsed chords render raw and None renders empty."""
        assert serialize_chord(UnparsedChord(text="Hm7")) == "Hm7"
        assert serialize_chord(None) == ""

    def test_str_uses_canonical_form(self) -> None:
        """Test a chord's str() is its canonical spelling."""
        assert str(Chord(note="D", quality="sus4", extension=7)) == "Dsus47"


class TestValidationErrors:
    """Test strict validation messages."""

    @pytest.mark.parametrize("text", ["", None, "  ", "Am7", "N.C.", "x"])
    def test_valid(self, text: str | None) -> None:
        """Test valid and empty slots produce no errors."""
        assert chord_validation_errors(text) == []

    def test_bad_format(self) -> None:
        """Test text outside the grammar."""
        assert chord_validation_errors("Hello") == ['Invalid chord format: "Hello"']

    def test_bad_add(self) -> None:
        """Test an out-of-range add."""
        assert chord_validation_errors("Cadd3") == ["Invalid add: 3. Valid adds are: 2, 4, 6, 9"]

    def test_bad_extension_and_add(self) -> None:
        """Test both numeric errors are reported."""
        errors = chord_validation_errors("C8add3")
        assert len(errors) == 2
        assert errors[0].startswith("Invalid extension: 8")
        assert errors[1].startswith("Invalid add: 3")
