"""Sheet transposition."""

from __future__ import annotations

from dataclasses import replace
from functools import partial

from chord_sheet.grammar import parse_chord_lenient, serialize_chord
from chord_sheet.pitch_class import transpose_chord
from chord_sheet.sheet_parser.models import ChordSheet
from chord_sheet.validation import map_chords


def transpose_key(key: str | None, semitones: int) -> str | None:
    """Transpose a key name, leaving unrecognised keys unchanged.

    Examples
    --------
    >>> transpose_key("Am", 3)
    'Cm'
    >>> transpose_key("Dorian", 3)
    'Dorian'
    """
    if not key:
        return key
    chord = parse_chord_lenient(key)
    if chord is None:
        return key
    return serialize_chord(transpose_chord(chord, semitones))


def transpose_sheet(sheet: ChordSheet, semitones: int) -> ChordSheet:
    """Transpose every chord and the key of a sheet.

    Special markers and unparsed chords are kept as written.

    Parameters
    ----------
    sheet : ChordSheet
        The sheet to transpose.
    semitones : int
        Number of semitones (positive = up).

    Returns
    -------
    ChordSheet
        A new, transposed sheet.
    """
    if semitones % 12 == 0:
        return sheet
    transposed = map_chords(sheet, partial(transpose_chord, semitones=semitones))
    return replace(transposed, key=transpose_key(sheet.key, semitones))
