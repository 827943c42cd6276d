"""JSON serialization for chord sheets.

Structured chords are encoded as objects, special markers as the strings
``"N.C."`` and ``"x"``, and unparsed legacy chords as their raw string::

    {"word": "Hello", "chord": {"note": "A", "quality": "minor", ...}}
    {"word": "", "chord": "N.C."}

Reading also accepts the legacy line shape ``{"chords": [...],
"lyrics": "..."}``, where chords pair with lyric words by position, and the
versioned file envelope ``{"version": "1.0", "sheet": {...}}``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from chord_sheet.models import (
    NOTES,
    QUALITIES,
    SPECIAL_MARKERS,
    Chord,
    ChordValue,
    SpecialChord,
    UnparsedChord,
)
from chord_sheet.sheet_parser.models import (
    DEFAULT_ARTIST,
    DEFAULT_TITLE,
    SECTION_TYPES,
    ChordSheet,
    Line,
    Section,
    Word,
)

FILE_VERSION = "1.0"
LANGUAGES: tuple[str, ...] = ("he", "ar", "en")
ACCIDENTALS: tuple[str | None, ...] = (None, "#", "b")


def chord_to_json(chord: ChordValue | None) -> dict[str, Any] | str | None:
    """Encode a chord value.

    Examples
    --------
    >>> chord_to_json(SpecialChord(marker="x"))
    'x'
    >>> chord_to_json(Chord(note="A", quality="minor"))["quality"]
    'minor'
    """
    if chord is None:
        return None
    if isinstance(chord, SpecialChord):
        return chord.marker
    if isinstance(chord, UnparsedChord):
        return chord.text
    return {
        "note": chord.note,
        "accidental": chord.accidental,
        "quality": chord.quality,
        "extension": chord.extension,
        "add": chord.add,
        "inversion": chord.inversion,
        "inversionAccidental": chord.inversion_accidental,
        "explicitMaj": chord.explicit_maj,
    }


def _optional_int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Chord field {key!r} must be an integer, got {value!r}"
        raise ValueError(msg)
    return value


def _choice(data: Mapping[str, Any], key: str, choices: tuple[Any, ...], default: Any) -> Any:
    value = data.get(key, default)
    if value is None:
        value = default
    if value not in choices:
        msg = f"Chord field {key!r} has invalid value {value!r}"
        raise ValueError(msg)
    return value


def chord_from_json(data: Any) -> ChordValue | None:
    """Decode a chord value.

    Strings other than the special markers become ``UnparsedChord`` so no
    information is lost; use ``validation.normalize_sheet`` to parse them.

    Raises
    ------
    ValueError
        If a chord object has missing or invalid fields.

    Examples
    --------
    >>> chord_from_json("N.C.")
    SpecialChord(marker='N.C.')
    >>> chord_from_json("Amin7")
    UnparsedChord(text='Amin7')
    """
    if data is None or data == "":
        return None
    if isinstance(data, str):
        if data in SPECIAL_MARKERS:
            return SpecialChord(marker=data)
        return UnparsedChord(text=data)
    if not isinstance(data, Mapping):
        msg = f"Chord must be an object or a string, got {type(data).__name__}"
        raise ValueError(msg)

    special = data.get("special")
    if special is not None:
        if special not in SPECIAL_MARKERS:
            msg = f"Unknown special chord marker: {special!r}"
            raise ValueError(msg)
        return SpecialChord(marker=special)

    if data.get("note") not in NOTES:
        msg = f"Chord has invalid note: {data.get('note')!r}"
        raise ValueError(msg)

    inversion = data.get("inversion")
    if inversion is not None and inversion not in NOTES:
        msg = f"Chord has invalid inversion: {inversion!r}"
        raise ValueError(msg)

    extension = _optional_int(data, "extension")
    return Chord(
        note=data["note"],
        accidental=_choice(data, "accidental", ACCIDENTALS, None),
        quality=_choice(data, "quality", QUALITIES, "major"),
        extension=extension,
        add=_optional_int(data, "add"),
        inversion=inversion,
        inversion_accidental=_choice(data, "inversionAccidental", ACCIDENTALS, None),
        explicit_maj=bool(data.get("explicitMaj", False)) and extension is not None,
    )


def line_to_json(line: Line) -> dict[str, Any]:
    """Encode a line."""
    return {"words": [{"word": w.text, "chord": chord_to_json(w.chord)} for w in line.words]}


def _legacy_line(data: Mapping[str, Any]) -> Line:
    chords = data["chords"]
    lyrics = data.get("lyrics", "")
    if not isinstance(chords, list) or not isinstance(lyrics, str):
        msg = "Legacy line needs a 'chords' list and a 'lyrics' string"
        raise ValueError(msg)

    texts = lyrics.split()
    count = max(len(texts), len(chords))
    words = [
        Word(
            text=texts[i] if i < len(texts) else "",
            chord=chord_from_json(chords[i]) if i < len(chords) else None,
        )
        for i in range(count)
    ]
    return Line(words=tuple(words))


def line_from_json(data: Any) -> Line:
    """Decode a line in either the word shape or the legacy shape.

    Raises
    ------
    ValueError
        If the line has neither shape.
    """
    if not isinstance(data, Mapping):
        msg = f"Line must be an object, got {type(data).__name__}"
        raise ValueError(msg)
    if "chords" in data:
        return _legacy_line(data)

    words = data.get("words")
    if not isinstance(words, list):
        msg = "Line needs a 'words' list"
        raise ValueError(msg)

    decoded: list[Word] = []
    for word in words:
        if not isinstance(word, Mapping) or not isinstance(word.get("word", ""), str):
            msg = f"Invalid word entry: {word!r}"
            raise ValueError(msg)
        decoded.append(Word(text=word.get("word", ""), chord=chord_from_json(word.get("chord"))))
    return Line(words=tuple(decoded))


def sheet_to_dict(sheet: ChordSheet) -> dict[str, Any]:
    """Convert a chord sheet to JSON-compatible data."""
    return {
        "title": sheet.title,
        "artist": sheet.artist,
        "language": sheet.language,
        "key": sheet.key,
        "tempo": sheet.tempo,
        "capo": sheet.capo,
        "sections": [
            {
                "id": section.id,
                "type": section.type,
                "label": section.label,
                "lines": [line_to_json(line) for line in section.lines],
            }
            for section in sheet.sections
        ],
    }


def _section_from_dict(data: Any, index: int) -> Section:
    if not isinstance(data, Mapping):
        msg = f"Section {index} must be an object"
        raise ValueError(msg)
    if not isinstance(data.get("id"), str) or not data["id"]:
        msg = f"Section {index} is missing a valid 'id'"
        raise ValueError(msg)
    if data.get("type") not in SECTION_TYPES:
        msg = f"Section {index} has invalid type {data.get('type')!r}"
        raise ValueError(msg)
    lines = data.get("lines")
    if not isinstance(lines, list):
        msg = f"Section {index} needs a 'lines' list"
        raise ValueError(msg)

    return Section(
        id=data["id"],
        type=data["type"],
        label=str(data.get("label") or data["type"].capitalize()),
        lines=tuple(line_from_json(line) for line in lines),
    )


def sheet_from_dict(data: Any) -> ChordSheet:
    """Build a chord sheet from JSON-compatible data.

    Accepts a bare sheet object or the versioned file envelope.

    Raises
    ------
    ValueError
        If the document is malformed.
    """
    if not isinstance(data, Mapping):
        msg = f"Chord sheet must be an object, got {type(data).__name__}"
        raise ValueError(msg)

    if "sheet" in data:
        version = data.get("version")
        if version != FILE_VERSION:
            msg = f"Unsupported file version: {version}. Expected version {FILE_VERSION}"
            raise ValueError(msg)
        return sheet_from_dict(data["sheet"])

    sections = data.get("sections")
    if not isinstance(sections, list):
        msg = "Chord sheet needs a 'sections' list"
        raise ValueError(msg)

    language = data.get("language") or "en"
    if language not in LANGUAGES:
        msg = f"Invalid language {language!r}, expected one of {', '.join(LANGUAGES)}"
        raise ValueError(msg)

    capo = data.get("capo")
    if capo is not None and (isinstance(capo, bool) or not isinstance(capo, int)):
        msg = f"Capo must be an integer, got {capo!r}"
        raise ValueError(msg)

    tempo = data.get("tempo")
    return ChordSheet(
        title=str(data.get("title") or DEFAULT_TITLE),
        artist=str(data.get("artist") or DEFAULT_ARTIST),
        language=language,
        key=data.get("key") or None,
        tempo=str(tempo) if tempo not in (None, "") else None,
        capo=capo,
        sections=tuple(_section_from_dict(s, i) for i, s in enumerate(sections)),
    )


def dumps(sheet: ChordSheet, *, indent: int | None = None, envelope: bool = False) -> str:
    """Serialize a chord sheet to a JSON string.

    Parameters
    ----------
    sheet : ChordSheet
        The sheet to serialize.
    indent : int | None
        JSON indentation, compact when None.
    envelope : bool
        Wrap the sheet in the versioned file envelope.

    Returns
    -------
    str
        JSON text. Non-ASCII lyrics are written as-is.
    """
    data: dict[str, Any] = sheet_to_dict(sheet)
    if envelope:
        data = {
            "version": FILE_VERSION,
            "metadata": {"createdAt": datetime.now(timezone.utc).isoformat()},
            "sheet": data,
        }
    return json.dumps(data, indent=indent, ensure_ascii=False)


def loads(text: str) -> ChordSheet:
    """Deserialize a chord sheet from a JSON string.

    Raises
    ------
    ValueError
        If the text is not JSON or the document is malformed.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid chord sheet JSON: {e}"
        raise ValueError(msg) from e
    return sheet_from_dict(data)
