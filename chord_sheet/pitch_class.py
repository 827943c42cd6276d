"""Pitch class operations for chord transposition.

This module maps spelled notes to pitch classes (0-11) and back, and
transposes chord values by semitones.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from chord_sheet.models import Chord

if TYPE_CHECKING:
    from chord_sheet.models import ChordValue

# Note name to pitch class (0-11, where C=0)
NOTE_TO_PC: dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "E#": 5,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "Cb": 11,
    "B#": 0,
}

# Pitch class to (note, accidental); sharps preferred, no double accidentals
PC_TO_NOTE: tuple[tuple[str, str | None], ...] = (
    ("C", None),
    ("C", "#"),
    ("D", None),
    ("D", "#"),
    ("E", None),
    ("F", None),
    ("F", "#"),
    ("G", None),
    ("G", "#"),
    ("A", None),
    ("A", "#"),
    ("B", None),
)

# Interval name to semitones from root (Harte bass degrees)
INTERVAL_TO_SEMITONES: dict[str, int] = {
    "1": 0,
    "b2": 1,
    "2": 2,
    "#2": 3,
    "b3": 3,
    "3": 4,
    "#3": 5,
    "4": 5,
    "#4": 6,
    "b5": 6,
    "5": 7,
    "#5": 8,
    "b6": 8,
    "6": 9,
    "#6": 10,
    "bb7": 9,
    "b7": 10,
    "7": 11,
    "#7": 0,
    "9": 2,  # 9th = 2nd + octave
    "b9": 1,
    "#9": 3,
    "11": 5,  # 11th = 4th + octave
    "#11": 6,
    "13": 9,  # 13th = 6th + octave
    "b13": 8,
}


def note_to_pc(note: str) -> int:
    """Convert a note name to pitch class (0-11).

    Parameters
    ----------
    note : str
        Note name (e.g., "C", "F#", "Bb").

    Returns
    -------
    int
        Pitch class (0-11, where C=0).

    Raises
    ------
    ValueError
        If the note name is not recognized.

    Examples
    --------
    >>> note_to_pc("C")
    0
    >>> note_to_pc("F#")
    6
    >>> note_to_pc("Bb")
    10
    """
    if note in NOTE_TO_PC:
        return NOTE_TO_PC[note]
    msg = f"Unknown note: {note}"
    raise ValueError(msg)


def pc_to_note(pc: int) -> str:
    """Spell a pitch class using the preference table.

    Examples
    --------
    >>> pc_to_note(10)
    'A#'
    >>> pc_to_note(-1)
    'B'
    """
    note, accidental = PC_TO_NOTE[pc % 12]
    return f"{note}{accidental or ''}"


def interval_to_note(root: str, interval: str) -> str:
    """Spell the note ``interval`` above ``root``.

    Raises
    ------
    ValueError
        If the root or interval is not recognized.

    Examples
    --------
    >>> interval_to_note("C", "3")
    'E'
    >>> interval_to_note("G", "b7")
    'F'
    """
    if interval not in INTERVAL_TO_SEMITONES:
        msg = f"Unknown interval: {interval}"
        raise ValueError(msg)
    return pc_to_note(note_to_pc(root) + INTERVAL_TO_SEMITONES[interval])


def _shift(note: str, accidental: str | None, semitones: int) -> tuple[str, str | None]:
    pc = note_to_pc(f"{note}{accidental or ''}")
    return PC_TO_NOTE[(pc + semitones) % 12]


def transpose_chord(chord: ChordValue, semitones: int) -> ChordValue:
    """Transpose a chord value by a number of semitones.

    The root and bass are respelled from the sharp-preferring table.
    Special markers and unparsed chords are returned unchanged, as is any
    chord when ``semitones`` is a multiple of 12.

    Transposing twice equals transposing once by the sum only for naturally
    or sharp-spelled chords. A flat spelling comes back as its sharp
    equivalent: ``Bb`` up one and down one is ``A#``, not ``Bb``.

    Parameters
    ----------
    chord : ChordValue
        The chord to transpose.
    semitones : int
        Number of semitones to transpose (positive = up).

    Returns
    -------
    ChordValue
        Transposed chord.

    Examples
    --------
    >>> from chord_sheet.models import Chord
    >>> transpose_chord(Chord(note="C", inversion="E"), 2).bass
    'F#'
    >>> transpose_chord(Chord(note="C"), -1).root
    'B'
    """
    if not isinstance(chord, Chord) or semitones % 12 == 0:
        return chord

    note, accidental = _shift(chord.note, chord.accidental, semitones)

    inversion = None
    inversion_accidental = None
    if chord.inversion is not None:
        inversion, inversion_accidental = _shift(
            chord.inversion, chord.inversion_accidental, semitones
        )

    return replace(
        chord,
        note=note,
        accidental=accidental,
        inversion=inversion,
        inversion_accidental=inversion_accidental,
    )
