"""Chord notation bridges to pychord and Harte.

Structured chords convert to pychord objects (for chord tones) and to Harte
labels (the notation used by MIR chord annotations). Harte labels and
pychord chords convert back into structured chords through the grammar.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from chord_sheet.grammar import parse_chord, serialize_chord
from chord_sheet.models import Chord, SpecialChord
from chord_sheet.pitch_class import INTERVAL_TO_SEMITONES, interval_to_note

if TYPE_CHECKING:
    from pychord import Chord as PyChord

# Harte shorthand for every quality spelling the grammar emits
QUALITY_TO_HARTE: dict[str, str] = {
    "": "maj",
    "m": "min",
    "5": "5",
    "6": "maj6",
    "m6": "min6",
    "7": "7",
    "maj7": "maj7",
    "m7": "min7",
    "mmaj7": "minmaj7",
    "9": "9",
    "maj9": "maj9",
    "m9": "min9",
    "11": "11",
    "maj11": "maj11",
    "m11": "min11",
    "13": "13",
    "maj13": "maj13",
    "m13": "min13",
    "add9": "maj(9)",
    "madd9": "min(9)",
    "dim": "dim",
    "dim7": "dim7",
    "aug": "aug",
    "aug7": "aug7",
    "sus2": "sus2",
    "sus4": "sus4",
    "sus27": "sus2(b7)",
    "sus47": "sus4(b7)",
}

# pychord accepts further spellings; some have no grammar equivalent
PYCHORD_TO_HARTE_QUALITY: dict[str, str] = {
    **QUALITY_TO_HARTE,
    "M7": "maj7",
    "mM7": "minmaj7",
    "m7-5": "hdim7",
    "m7b5": "hdim7",
    "dim6": "dim6",
    "7sus2": "7sus2",
    "7sus4": "7sus4",
}

HARTE_TO_PYCHORD_QUALITY: dict[str, str] = {
    **{harte: text for text, harte in QUALITY_TO_HARTE.items()},
    "7sus4": "sus47",
}


def _lookup(table: dict[str, str], quality: str, notation: str) -> str:
    try:
        return table[quality]
    except KeyError:
        msg = f"Unknown {notation} quality: {quality}"
        raise ValueError(msg) from None


def pychord_quality_to_harte(pychord_quality: str) -> str:
    """Convert a pychord quality string to Harte shorthand.

    Raises
    ------
    ValueError
        If the quality is not recognized.

    Examples
    --------
    >>> pychord_quality_to_harte("m7")
    'min7'
    >>> pychord_quality_to_harte("")
    'maj'
    """
    return _lookup(PYCHORD_TO_HARTE_QUALITY, pychord_quality, "pychord")


def harte_quality_to_pychord(harte_quality: str) -> str:
    """Map Harte shorthand back to the quality spelling of the grammar.

    Examples
    --------
    >>> harte_quality_to_pychord("min7")
    'm7'
    """
    return _lookup(HARTE_TO_PYCHORD_QUALITY, harte_quality, "Harte")


def quality_text(chord: Chord) -> str:
    """Canonical spelling of everything between the root and the bass.

    Examples
    --------
    >>> quality_text(Chord(note="B", accidental="b", quality="minor", extension=7, inversion="F"))
    'm7'
    """
    plain = replace(chord, inversion=None, inversion_accidental=None)
    return serialize_chord(plain)[len(chord.root):]


def to_pychord(chord: Chord) -> PyChord:
    """Build a pychord ``Chord`` from a structured chord.

    Raises
    ------
    ValueError
        If pychord does not know the chord's quality.
    """
    from pychord import Chord as PyChord

    return PyChord(serialize_chord(chord))


def from_pychord(chord: PyChord | str) -> Chord | None:
    """Convert a pychord chord (or pychord-notation string) to a Chord.

    Returns None when the pychord quality has no spelling in the grammar.

    Examples
    --------
    >>> from_pychord("CM7")
    Chord(note='C', accidental=None, quality='major', extension=7, add=None, \
inversion=None, inversion_accidental=None, explicit_maj=True)
    """
    from pychord import Chord as PyChord

    pc = PyChord(chord) if isinstance(chord, str) else chord
    parsed = parse_chord(f"{pc.root}{pc.quality}")
    if not isinstance(parsed, Chord):
        return None
    if pc.on:
        parsed = replace(parsed, inversion=pc.on[0], inversion_accidental=pc.on[1:] or None)
    return parsed


def chord_components(chord: Chord) -> list[str]:
    """List the note names that make up a chord.

    Examples
    --------
    >>> chord_components(Chord(note="A", quality="minor"))
    ['A', 'C', 'E']
    """
    return to_pychord(chord).components()


def to_harte(chord: Chord) -> str:
    """Convert a structured chord to a Harte label.

    Raises
    ------
    ValueError
        If the chord's quality has no Harte shorthand.

    Examples
    --------
    >>> to_harte(Chord(note="G", quality="minor", extension=7))
    'G:min7'
    >>> to_harte(Chord(note="C", inversion="E"))
    'C:maj/E'
    """
    result = f"{chord.root}:{pychord_quality_to_harte(quality_text(chord))}"
    if chord.bass:
        result = f"{result}/{chord.bass}"
    return result


def from_harte(label: str) -> Chord | SpecialChord | None:
    """Parse a Harte label into a chord value.

    ``N`` (no chord) maps to the ``N.C.`` marker. A bass given as a degree
    (``C:maj/3``) is spelled against the root.

    Parameters
    ----------
    label : str
        Chord in Harte notation (e.g., "G:min7", "C:maj", "F#:dim7/b3").

    Returns
    -------
    Chord | SpecialChord | None
        The chord, or None when the quality has no spelling in the grammar.

    Examples
    --------
    >>> str(from_harte("G:min7"))
    'Gm7'
    """
    if label.strip() == "N":
        return SpecialChord(marker="N.C.")

    from harte.harte import Harte

    hc = Harte(label)
    root = hc.get_root()
    shorthand = hc.get_shorthand()
    quality = HARTE_TO_PYCHORD_QUALITY.get(shorthand if shorthand else "maj")
    if quality is None:
        return None

    parsed = parse_chord(f"{root}{quality}")
    if not isinstance(parsed, Chord):
        return None

    if "/" in label:
        bass = label.split("/")[-1]
        if bass in INTERVAL_TO_SEMITONES:
            bass = interval_to_note(root, bass)
        parsed = replace(parsed, inversion=bass[0], inversion_accidental=bass[1:] or None)
    return parsed
