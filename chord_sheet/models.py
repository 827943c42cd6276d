"""Chord value models for chord-sheet.

A chord slot on a lyric word holds one of three variants: a structured
``Chord``, a ``SpecialChord`` marker ("no chord" / muted), or an
``UnparsedChord`` carrying a legacy raw string that never made it through
the grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Note = Literal["A", "B", "C", "D", "E", "F", "G"]
Accidental = Literal["#", "b"]
Quality = Literal["major", "minor", "dim", "aug", "sus2", "sus4"]
SpecialMarker = Literal["N.C.", "x"]

NOTES: tuple[str, ...] = ("A", "B", "C", "D", "E", "F", "G")
QUALITIES: tuple[str, ...] = ("major", "minor", "dim", "aug", "sus2", "sus4")
SPECIAL_MARKERS: tuple[str, ...] = ("N.C.", "x")

# Allowed numeric components
VALID_EXTENSIONS: frozenset[int] = frozenset({5, 6, 7, 9, 11, 13})
VALID_ADDS: frozenset[int] = frozenset({2, 4, 6, 9})


@dataclass(frozen=True)
class Chord:
    """Structured chord symbol.

    Parameters
    ----------
    note : Note
        Root letter (``"A"`` .. ``"G"``).
    accidental : Accidental | None
        ``"#"`` or ``"b"`` applied to the root.
    quality : Quality
        Triad quality, ``"major"`` when nothing was written.
    extension : int | None
        Numeric extension (5, 6, 7, 9, 11 or 13).
    add : int | None
        Added tone (2, 4, 6 or 9).
    inversion : Note | None
        Bass letter for slash chords.
    inversion_accidental : Accidental | None
        Accidental on the bass note. Parsing never sets this; transposition
        does so the bass keeps its exact pitch.
    explicit_maj : bool
        ``"maj"`` was written with an extension (``Cmaj7`` rather than
        ``C7``). On minor chords it marks minor-major (``Cmmaj7``).

    Examples
    --------
    >>> chord = Chord(note="A", quality="minor", extension=7)
    >>> chord.root
    'A'
    >>> Chord(note="B", accidental="b").root
    'Bb'
    """

    note: Note
    accidental: Accidental | None = None
    quality: Quality = "major"
    extension: int | None = None
    add: int | None = None
    inversion: Note | None = None
    inversion_accidental: Accidental | None = None
    explicit_maj: bool = False

    @property
    def root(self) -> str:
        """Root spelled with its accidental (e.g. ``"F#"``)."""
        return f"{self.note}{self.accidental or ''}"

    @property
    def bass(self) -> str | None:
        """Bass spelled with its accidental, or None."""
        if self.inversion is None:
            return None
        return f"{self.inversion}{self.inversion_accidental or ''}"

    def __str__(self) -> str:
        from chord_sheet.grammar import serialize_chord

        return serialize_chord(self)


@dataclass(frozen=True)
class SpecialChord:
    """A non-harmonic marker written in a chord slot.

    Parameters
    ----------
    marker : SpecialMarker
        ``"N.C."`` (no chord) or ``"x"`` (muted).
    """

    marker: SpecialMarker

    def __str__(self) -> str:
        return self.marker


@dataclass(frozen=True)
class UnparsedChord:
    """A raw chord string kept as-is because it could not be parsed.

    Parameters
    ----------
    text : str
        The original text.
    """

    text: str

    def __str__(self) -> str:
        return self.text


ChordValue = Chord | SpecialChord | UnparsedChord
