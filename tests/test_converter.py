import pytest

from chord_sheet import (
    Chord,
    SpecialChord,
    chord_components,
    from_harte,
    from_pychord,
    harte_quality_to_pychord,
    parse_chord,
    pychord_quality_to_harte,
    serialize_chord,
    to_harte,
    to_pychord,
)
from chord_sheet.converter import quality_text


class TestQualityMapping:
    def test_pychord_major_to_harte(self):
        assert pychord_quality_to_harte("") == "maj"

    def test_pychord_minor_to_harte(self):
        assert pychord_quality_to_harte("m") == "min"

    def test_pychord_minor7_to_harte(self):
        assert pychord_quality_to_harte("m7") == "min7"

    def test_pychord_maj7_to_harte(self):
        assert pychord_quality_to_harte("maj7") == "maj7"

    def test_pychord_dim7_to_harte(self):
        assert pychord_quality_to_harte("dim7") == "dim7"

    def test_pychord_hdim_to_harte(self):
        assert pychord_quality_to_harte("m7-5") == "hdim7"

    def test_harte_maj_to_pychord(self):
        assert harte_quality_to_pychord("maj") == ""

    def test_harte_min7_to_pychord(self):
        assert harte_quality_to_pychord("min7") == "m7"

    def test_unknown_pychord_quality_raises(self):
        with pytest.raises(ValueError, match="Unknown pychord quality"):
            pychord_quality_to_harte("unknown_quality")

    def test_unknown_harte_quality_raises(self):
        with pytest.raises(ValueError, match="Unknown Harte quality"):
            harte_quality_to_pychord("unknown_quality")


class TestQualityText:
    @pytest.mark.parametrize(
        ("text", "quality"),
        [("C", ""), ("Bbm7/F", "m7"), ("F#dim7", "dim7"), ("Cmaj7", "maj7"), ("Dsus47", "sus47")],
    )
    def test_quality_text(self, text, quality):
        assert quality_text(parse_chord(text)) == quality


class TestToHarte:
    @pytest.mark.parametrize(
        ("text", "harte"),
        [
            ("C", "C:maj"),
            ("Gm7", "G:min7"),
            ("Bbm", "Bb:min"),
            ("F#dim7", "F#:dim7"),
            ("Dmaj7", "D:maj7"),
            ("E7", "E:7"),
            ("Cadd9", "C:maj(9)"),
            ("Am6", "A:min6"),
            ("Cmmaj7", "C:minmaj7"),
            ("C/E", "C:maj/E"),
        ],
    )
    def test_to_harte(self, text, harte):
        assert to_harte(parse_chord(text)) == harte

    def test_transposed_bass(self):
        chord = Chord(note="D", inversion="F", inversion_accidental="#")
        assert to_harte(chord) == "D:maj/F#"

    def test_unmapped_quality_raises(self):
        with pytest.raises(ValueError, match="Unknown pychord quality"):
            to_harte(parse_chord("Cadd2"))


class TestFromHarte:
    def test_simple_major(self):
        assert from_harte("C:maj") == Chord(note="C")

    def test_minor_seventh(self):
        assert serialize_chord(from_harte("G:min7")) == "Gm7"

    def test_flat_root(self):
        chord = from_harte("Bb:min7")
        assert chord.root == "Bb"
        assert chord.quality == "minor"

    def test_no_chord(self):
        assert from_harte("N") == SpecialChord(marker="N.C.")

    def test_bass_degree(self):
        chord = from_harte("C:maj/3")
        assert chord.bass == "E"

    def test_minor_third_bass_degree(self):
        assert serialize_chord(from_harte("A:min/b3")) == "Am/C"

    def test_unmapped_shorthand(self):
        assert from_harte("C:hdim7") is None


class TestFromPychord:
    def test_simple_major(self):
        assert from_pychord("C") == Chord(note="C")

    def test_minor_seventh(self):
        assert serialize_chord(from_pychord("Gm7")) == "Gm7"

    def test_major_seventh_alias(self):
        assert serialize_chord(from_pychord("CM7")) == "Cmaj7"

    def test_slash_chord(self):
        chord = from_pychord("C/E")
        assert chord.root == "C"
        assert chord.bass == "E"

    def test_sharp_bass(self):
        assert from_pychord("D/F#").bass == "F#"

    def test_pychord_object(self):
        from pychord import Chord as PyChord

        assert serialize_chord(from_pychord(PyChord("F#dim7"))) == "F#dim7"

    def test_unspellable_quality(self):
        assert from_pychord("Cm7-5") is None


class TestPychordBridge:
    def test_to_pychord(self):
        assert to_pychord(parse_chord("Gm7")).chord == "Gm7"

    def test_components(self):
        assert chord_components(parse_chord("Am")) == ["A", "C", "E"]

    def test_seventh_components(self):
        assert chord_components(parse_chord("G7")) == ["G", "B", "D", "F"]


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        ["C", "Gm7", "Bbm", "F#dim7", "Am", "Dmaj7", "E7", "Cmaj7/G"],
    )
    def test_pychord_roundtrip(self, text):
        chord = parse_chord(text)
        assert from_pychord(to_pychord(chord)) == chord

    @pytest.mark.parametrize(
        "harte_str",
        ["C:maj", "G:min7", "Bb:min", "F#:dim7", "A:min", "D:maj7", "E:7"],
    )
    def test_harte_roundtrip(self, harte_str):
        assert to_harte(from_harte(harte_str)) == harte_str
