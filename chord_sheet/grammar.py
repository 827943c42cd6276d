"""Chord grammar: strict parser, lenient repair pass and canonical serializer.

The strict path (``parse_chord``) accepts only strings that match the grammar
in full and returns None for anything else. The lenient path
(``parse_chord_lenient``) first tries the strict parse, then rewrites common
OCR and typing variants (spelled-out qualities, Unicode accidentals, a
truncated "di") and tries the strict parse once more.

Canonical spelling
------------------
root + accidental + quality marker + extension + ``add<n>`` + ``/<bass>``,
where the quality marker is ``m`` (minor), nothing (major), ``maj`` (major
written explicitly with an extension), ``dim``, ``aug``, ``sus2`` or
``sus4``. Minor-major chords spell as ``mmaj<n>``.

Examples
--------
>>> serialize_chord(parse_chord("Amin7"))
'Am7'
>>> parse_chord("Cadd12") is None
True
>>> serialize_chord(parse_chord_lenient("G#di"))
'G#dim'
"""

from __future__ import annotations

import re

from chord_sheet.models import (
    NOTES,
    VALID_ADDS,
    VALID_EXTENSIONS,
    Chord,
    ChordValue,
    SpecialChord,
    UnparsedChord,
)

MAX_CHORD_LENGTH = 15

NO_CHORD_RE = re.compile(r"^N\.?C\.?$", re.IGNORECASE)
MUTED_RE = re.compile(r"^[xX]$")

SHARP_GLYPHS = ("#", "♯")
FLAT_GLYPHS = ("b", "♭")

# Quality markers, tried in this order
DIM_RE = re.compile(r"[Dd][Ii][Mm]")
MAJ_RE = re.compile(r"(?:[Mm][Aa][Jj]|M(?=\d))(\d+)?")
MINOR_MAJOR_RE = re.compile(r"(?:m|[Mm][Ii][Nn])(?:[Mm][Aa][Jj]|M)(\d+)?")
MINOR_RE = re.compile(r"(?:[Mm][Ii][Nn]|m)(\d+)?")
AUG_RE = re.compile(r"[Aa][Uu][Gg]")
SUS_RE = re.compile(r"[Ss][Uu][Ss]([24])?")

EXTENSION_RE = re.compile(r"\d+")
ADD_RE = re.compile(r"[Aa][Dd][Dd](\d+)")
INVERSION_RE = re.compile(r"/([A-G])([#b♯♭])?")

# Rewrites applied by the lenient path, in order
REPAIRS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\s+"), ""),
    (re.compile("♯"), "#"),
    (re.compile("♭"), "b"),
    (re.compile(r"^([A-G])sharp", re.IGNORECASE), r"\1#"),
    (re.compile(r"^([A-G])flat", re.IGNORECASE), r"\1b"),
    (re.compile(r"diminished", re.IGNORECASE), "dim"),
    (re.compile(r"augmented", re.IGNORECASE), "aug"),
    (re.compile(r"minor", re.IGNORECASE), "m"),
    (re.compile(r"major", re.IGNORECASE), "maj"),
    (re.compile(r"^([A-G][#b]?)di$"), r"\1dim"),
    (re.compile(r"^([A-G][#b]?)(\d+)sus([24]?)$"), r"\1sus\3\2"),
)


def _digits(text: str | None) -> int | None:
    return int(text) if text else None


def _scan_quality(text: str, pos: int) -> tuple[str, int | None, bool, int]:
    """Match the quality marker at ``pos``.

    Returns
    -------
    tuple[str, int | None, bool, int]
        Quality, extension consumed with the marker (if any), explicit-major
        flag, and the position after the marker.
    """
    match = DIM_RE.match(text, pos)
    if match:
        return "dim", None, False, match.end()

    # "maj" before minor, since both start with "m"
    match = MAJ_RE.match(text, pos)
    if match:
        return "major", _digits(match.group(1)), True, match.end()

    match = MINOR_MAJOR_RE.match(text, pos)
    if match:
        extension = _digits(match.group(1))
        return "minor", 7 if extension is None else extension, True, match.end()

    match = MINOR_RE.match(text, pos)
    if match:
        return "minor", _digits(match.group(1)), False, match.end()

    match = AUG_RE.match(text, pos)
    if match:
        return "aug", None, False, match.end()

    match = SUS_RE.match(text, pos)
    if match:
        quality = "sus2" if match.group(1) == "2" else "sus4"
        return quality, None, False, match.end()

    return "major", None, False, pos


def _scan(text: str) -> Chord | SpecialChord | None:
    """Tokenize ``text`` against the grammar without range checks.

    Extensions and adds are returned as written, so callers can report
    out-of-range numbers before rejecting them.
    """
    if NO_CHORD_RE.match(text):
        return SpecialChord(marker="N.C.")
    if MUTED_RE.match(text):
        return SpecialChord(marker="x")

    if not text or text[0] not in NOTES:
        return None
    note = text[0]
    pos = 1
    n = len(text)

    accidental = None
    if pos < n and text[pos] in SHARP_GLYPHS:
        accidental = "#"
        pos += 1
    elif pos < n and text[pos] in FLAT_GLYPHS:
        # No quality marker starts with "b", so a "b" here is always a flat
        accidental = "b"
        pos += 1

    quality, extension, explicit_maj, pos = _scan_quality(text, pos)

    if extension is None:
        match = EXTENSION_RE.match(text, pos)
        if match:
            extension = int(match.group(0))
            pos = match.end()

    add = None
    match = ADD_RE.match(text, pos)
    if match:
        add = int(match.group(1))
        pos = match.end()

    inversion = None
    match = INVERSION_RE.match(text, pos)
    if match:
        # Only the bass letter is kept
        inversion = match.group(1)
        pos = match.end()

    if pos != n:
        return None

    return Chord(
        note=note,
        accidental=accidental,
        quality=quality,
        extension=extension,
        add=add,
        inversion=inversion,
        explicit_maj=explicit_maj and extension is not None,
    )


def _is_valid_structure(chord: Chord) -> bool:
    if chord.extension is not None and chord.extension not in VALID_EXTENSIONS:
        return False
    if chord.add is not None and chord.add not in VALID_ADDS:
        return False
    return chord.inversion is None or chord.inversion in NOTES


def parse_chord(text: str | None) -> Chord | SpecialChord | None:
    """Parse a chord symbol with the strict grammar.

    Parameters
    ----------
    text : str | None
        The chord text. Surrounding whitespace is ignored.

    Returns
    -------
    Chord | SpecialChord | None
        The parsed chord, or None when the text is not a valid chord.

    Examples
    --------
    >>> parse_chord("C#m7/E")
    Chord(note='C', accidental='#', quality='minor', extension=7, add=None, \
inversion='E', inversion_accidental=None, explicit_maj=False)
    >>> parse_chord("N.C.")
    SpecialChord(marker='N.C.')
    >>> parse_chord("H") is None
    True
    """
    if not text:
        return None
    text = text.strip()
    if not text or len(text) > MAX_CHORD_LENGTH:
        return None

    scanned = _scan(text)
    if scanned is None or isinstance(scanned, SpecialChord):
        return scanned
    if not _is_valid_structure(scanned):
        return None
    return scanned


def repair_chord_text(text: str) -> str:
    """Rewrite common OCR and typing variants into grammar spelling.

    Examples
    --------
    >>> repair_chord_text("A minor")
    'Am'
    >>> repair_chord_text("G#di")
    'G#dim'
    >>> repair_chord_text("B♭7sus4")
    'Bbsus47'
    """
    repaired = text.strip()
    for pattern, replacement in REPAIRS:
        repaired = pattern.sub(replacement, repaired)
    return repaired


def parse_chord_lenient(text: str | None) -> Chord | SpecialChord | None:
    """Parse a chord, repairing garbled spellings when the strict parse fails.

    Parameters
    ----------
    text : str | None
        The chord text, typically an OCR token.

    Returns
    -------
    Chord | SpecialChord | None
        The parsed chord, or None if even the repaired text is invalid.
    """
    parsed = parse_chord(text)
    if parsed is not None or not text:
        return parsed
    repaired = repair_chord_text(text)
    if repaired == text.strip():
        return None
    return parse_chord(repaired)


def is_chord(text: str | None, *, lenient: bool = False) -> bool:
    """Check whether ``text`` is a chord symbol.

    Examples
    --------
    >>> is_chord("Gm7")
    True
    >>> is_chord("Hello")
    False
    >>> is_chord("Cminor"), is_chord("Cminor", lenient=True)
    (False, True)
    """
    parse = parse_chord_lenient if lenient else parse_chord
    return parse(text) is not None


def serialize_chord(chord: ChordValue | None) -> str:
    """Render a chord value in canonical spelling.

    Parameters
    ----------
    chord : ChordValue | None
        The chord to render. None renders as an empty string.

    Returns
    -------
    str
        Canonical chord text. Unparsed values render their raw text.

    Examples
    --------
    >>> serialize_chord(Chord(note="F", extension=7, explicit_maj=True))
    'Fmaj7'
    >>> serialize_chord(Chord(note="C", inversion="E"))
    'C/E'
    >>> serialize_chord(SpecialChord(marker="x"))
    'x'
    """
    if chord is None:
        return ""
    if isinstance(chord, SpecialChord):
        return chord.marker
    if isinstance(chord, UnparsedChord):
        return chord.text

    parts = [chord.note, chord.accidental or ""]
    explicit = chord.explicit_maj and chord.extension is not None

    if chord.quality == "minor":
        parts.append("mmaj" if explicit else "m")
    elif chord.quality == "major":
        parts.append("maj" if explicit else "")
    else:
        parts.append(chord.quality)

    if chord.extension is not None:
        parts.append(str(chord.extension))
    if chord.add is not None:
        parts.append(f"add{chord.add}")
    if chord.inversion is not None:
        parts.append(f"/{chord.inversion}{chord.inversion_accidental or ''}")

    return "".join(parts)


def chord_validation_errors(text: str | None) -> list[str]:
    """List the reasons ``text`` fails strict validation.

    Empty text is a valid "no chord" slot and yields no errors.

    Examples
    --------
    >>> chord_validation_errors("Am7")
    []
    >>> chord_validation_errors("C8")
    ['Invalid extension: 8. Valid extensions are: 5, 6, 7, 9, 11, 13']
    """
    errors: list[str] = []
    if not text or not text.strip():
        return errors

    trimmed = text.strip()
    scanned = _scan(trimmed) if len(trimmed) <= MAX_CHORD_LENGTH else None
    if scanned is None:
        errors.append(f'Invalid chord format: "{trimmed}"')
        return errors
    if isinstance(scanned, SpecialChord):
        return errors

    if scanned.extension is not None and scanned.extension not in VALID_EXTENSIONS:
        valid = ", ".join(str(n) for n in sorted(VALID_EXTENSIONS))
        errors.append(f"Invalid extension: {scanned.extension}. Valid extensions are: {valid}")
    if scanned.add is not None and scanned.add not in VALID_ADDS:
        valid = ", ".join(str(n) for n in sorted(VALID_ADDS))
        errors.append(f"Invalid add: {scanned.add}. Valid adds are: {valid}")

    return errors
