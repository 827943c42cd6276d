"""Tests for metadata extraction and language detection."""

import pytest

from chord_sheet.sheet_parser.metadata import SheetMetadata, detect_language, extract_metadata


class TestExtractMetadata:
    """Test metadata lines."""

    def test_fields(self) -> None:
        """Test plain field lines."""
        meta, body = extract_metadata(
            ["Title: Paper Boats", "Artist: The Lanterns", "Key: G", "Capo: 2", "Tempo: 96", "G", "la"]
        )
        assert meta == SheetMetadata(
            title="Paper Boats", artist="The Lanterns", key="G", tempo="96", capo=2
        )
        assert body == ["G", "la"]

    def test_chordpro_directives(self) -> None:
        """Test ChordPro-style directives."""
        meta, body = extract_metadata(["{title: Lamplight}", "{st: Quiet Harbor}", "{bpm: 72}"])
        assert (meta.title, meta.artist, meta.tempo) == ("Lamplight", "Quiet Harbor", "72")
        assert body == []

    def test_hebrew_fields(self) -> None:
        """Test Hebrew field names."""
        meta, _ = extract_metadata(["שם השיר: שיר הים", "מבצע: להקת החוף", "סולם: Am", "קאפו: 1"])
        assert meta == SheetMetadata(title="שיר הים", artist="להקת החוף", key="Am", capo=1)

    @pytest.mark.parametrize(
        ("line", "capo"),
        [("Capo: 2", 2), ("Capo 3rd fret", 3), ("CAPO on fret 5", None), ("capo - fret 4", 4)],
    )
    def test_capo(self, line: str, capo: int | None) -> None:
        """Test capo spellings."""
        meta, _ = extract_metadata([line])
        assert meta.capo == capo

    @pytest.mark.parametrize(
        ("value", "key"),
        [("A minor", "Am"), ("Bbmaj", "Bb"), ("F#m", "F#m"), ("Dorian", "Dorian")],
    )
    def test_key_normalized(self, value: str, key: str) -> None:
        """Test keys are spelled canonically when they parse."""
        meta, _ = extract_metadata([f"Key: {value}"])
        assert meta.key == key

    def test_first_value_wins(self) -> None:
        """Test a repeated field keeps its first value and both lines go."""
        meta, body = extract_metadata(["Title: One", "Title: Two", "lyric"])
        assert meta.title == "One"
        assert body == ["lyric"]

    def test_unknown_fields_kept(self) -> None:
        """Test colon lines that are not metadata stay in the body."""
        lines = ["He said: go home", "{comment: softly}", "Note: slow"]
        meta, body = extract_metadata(lines)
        assert meta == SheetMetadata()
        assert body == lines

    def test_no_metadata(self) -> None:
        """Test a sheet without metadata."""
        meta, body = extract_metadata(["Am", "hello"])
        assert meta == SheetMetadata()
        assert body == ["Am", "hello"]


class TestDetectLanguage:
    """Test script-based language detection."""

    @pytest.mark.parametrize(
        ("text", "language"),
        [
            ("Am   G\nשיר של ים", "he"),
            ("مرحبا بكم", "ar"),
            ("Hello world", "en"),
            ("", "en"),
            ("שלום مرحبا بكم", "ar"),
            ("שלום عالم", "he"),
        ],
    )
    def test_detect(self, text: str, language: str) -> None:
        """Test the dominant script decides the language."""
        assert detect_language(text) == language
