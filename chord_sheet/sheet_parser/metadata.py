"""Sheet metadata extraction and language detection.

Only explicit metadata is read: ``Title:``-style field lines and ChordPro
directives such as ``{title: ...}``. Lines that carry metadata are removed
from the body so they are never read as lyrics.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

from chord_sheet.grammar import parse_chord_lenient, serialize_chord
from chord_sheet.sheet_parser.models import Language

logger = logging.getLogger(__name__)

FIELD_RE = re.compile(r"^\s*([^\W\d_][\w ]*?)\s*:\s*(.+?)\s*$")
DIRECTIVE_RE = re.compile(r"^\s*\{\s*(\w+)\s*:\s*(.*?)\s*\}\s*$")
CAPO_RE = re.compile(r"^\s*capo\b\W*(?:fret\W*)?(\d+)", re.IGNORECASE)
DIGITS_RE = re.compile(r"\d+")

# Field or directive name (lowercase) to metadata attribute
FIELD_NAMES: dict[str, str] = {
    "title": "title",
    "t": "title",
    "song": "title",
    "artist": "artist",
    "a": "artist",
    "subtitle": "artist",
    "st": "artist",
    "key": "key",
    "capo": "capo",
    "tempo": "tempo",
    "bpm": "tempo",
    # Hebrew
    "שם השיר": "title",
    "מבצע": "artist",
    "סולם": "key",
    "קאפו": "capo",
}

HEBREW_RE = re.compile("[\u0590-\u05FF\uFB1D-\uFB4F]")
ARABIC_RE = re.compile("[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]")


@dataclass(frozen=True)
class SheetMetadata:
    """Metadata found in a sheet. None marks a field that was not present.

    Parameters
    ----------
    title : str | None
        Song title.
    artist : str | None
        Performing artist.
    key : str | None
        Song key, canonically spelled when it parses as a chord.
    tempo : str | None
        Tempo as written.
    capo : int | None
        Capo fret.
    """

    title: str | None = None
    artist: str | None = None
    key: str | None = None
    tempo: str | None = None
    capo: int | None = None


def _normalize_key(value: str) -> str:
    chord = parse_chord_lenient(value)
    return serialize_chord(chord) if chord is not None else value


def _match_field(line: str) -> tuple[str, str] | None:
    """Return the metadata attribute and raw value a line declares."""
    match = DIRECTIVE_RE.match(line) or FIELD_RE.match(line)
    if match:
        name = FIELD_NAMES.get(match.group(1).strip().lower())
        if name is not None:
            return name, match.group(2)

    match = CAPO_RE.match(line)
    if match:
        return "capo", match.group(1)
    return None


def extract_metadata(lines: list[str]) -> tuple[SheetMetadata, list[str]]:
    """Pull metadata lines out of a sheet.

    The first value found for each field wins; every metadata line is
    removed from the returned body.

    Parameters
    ----------
    lines : list[str]
        Preprocessed sheet lines.

    Returns
    -------
    tuple[SheetMetadata, list[str]]
        The metadata and the remaining lines.

    Examples
    --------
    >>> meta, body = extract_metadata(["Title: Paper Boats", "Key: A minor", "Am", "la la"])
    >>> meta.title, meta.key
    ('Paper Boats', 'Am')
    >>> body
    ['Am', 'la la']
    """
    metadata = SheetMetadata()
    body: list[str] = []

    for line in lines:
        field = _match_field(line)
        if field is None:
            body.append(line)
            continue

        name, value = field
        if getattr(metadata, name) is not None:
            continue

        if name == "capo":
            digits = DIGITS_RE.search(value)
            if digits is None:
                continue
            metadata = replace(metadata, capo=int(digits.group(0)))
        elif name == "key":
            metadata = replace(metadata, key=_normalize_key(value))
        elif value:
            metadata = replace(metadata, **{name: value})
        logger.debug("Metadata %s = %r", name, getattr(metadata, name))

    return metadata, body


def detect_language(text: str) -> Language:
    """Detect the lyric language from its script.

    Returns "he" for Hebrew, "ar" for Arabic, "en" otherwise. When both
    scripts occur, the one with more characters wins.

    Examples
    --------
    >>> detect_language("Am\\nשיר של יום")
    'he'
    >>> detect_language("Hello")
    'en'
    """
    hebrew = len(HEBREW_RE.findall(text))
    arabic = len(ARABIC_RE.findall(text))
    if hebrew == 0 and arabic == 0:
        return "en"
    return "he" if hebrew >= arabic else "ar"
