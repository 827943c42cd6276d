"""Data models for chord sheet parsing.

This module defines the tokens produced while reading a sheet and the
document structures it is assembled into: words carrying an optional chord,
lines of words, typed sections, and the chord sheet itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from chord_sheet.models import ChordValue


TokenKind = Literal["chord", "word", "punct", "other"]
LineKind = Literal["empty", "header", "chord", "lyric"]
SectionType = Literal["verse", "chorus", "bridge", "intro", "outro"]
Language = Literal["he", "ar", "en"]

SECTION_TYPES: tuple[str, ...] = ("verse", "chorus", "bridge", "intro", "outro")
DEFAULT_TITLE = "Untitled"
DEFAULT_ARTIST = "Unknown"


@dataclass(frozen=True)
class Token:
    """A token with column span information.

    Parameters
    ----------
    text : str
        The token text content.
    start : int
        Inclusive start column (0-indexed).
    end : int
        Exclusive end column.
    kind : TokenKind
        The token classification.
    chord : ChordValue | None
        Parsed chord if kind is "chord", None otherwise.

    Examples
    --------
    >>> token = Token(text="Gm7", start=0, end=3, kind="chord")
    >>> token.start, token.end
    (0, 3)
    """

    text: str
    start: int
    end: int
    kind: TokenKind = "other"
    chord: ChordValue | None = None

    @property
    def width(self) -> int:
        """Number of columns the token spans."""
        return self.end - self.start


@dataclass(frozen=True)
class Word:
    """A lyric word with the chord sung on it.

    Parameters
    ----------
    text : str
        The lyric text. Empty for chords with no lyric (instrumental lines).
    chord : ChordValue | None
        The chord above the word, or None.
    """

    text: str
    chord: ChordValue | None = None


@dataclass(frozen=True)
class Line:
    """An ordered sequence of words.

    Parameters
    ----------
    words : tuple[Word, ...]
        Words in source order.

    Examples
    --------
    >>> from chord_sheet.models import Chord
    >>> line = Line(words=(Word("Hello", Chord(note="C")), Word("world")))
    >>> line.lyrics
    'Hello world'
    >>> [str(c) for c in line.chords]
    ['C']
    """

    words: tuple[Word, ...]

    @property
    def lyrics(self) -> str:
        """Lyric text of the line, words joined by single spaces."""
        return " ".join(w.text for w in self.words if w.text)

    @property
    def chords(self) -> tuple[ChordValue, ...]:
        """Chords of the line in word order."""
        return tuple(w.chord for w in self.words if w.chord is not None)


@dataclass(frozen=True)
class Section:
    """A labelled section of a chord sheet.

    Parameters
    ----------
    id : str
        Identifier unique within the sheet (e.g., "section-1").
    type : SectionType
        Semantic type of the section.
    label : str
        Human label as written (e.g., "Verse 1", "פזמון").
    lines : tuple[Line, ...]
        Lines in source order.
    """

    id: str
    type: SectionType
    label: str
    lines: tuple[Line, ...]


@dataclass(frozen=True)
class ChordSheet:
    """Complete parsed chord sheet.

    Parameters
    ----------
    title : str
        Song title.
    artist : str
        Performing artist.
    language : Language
        Detected lyric language.
    key : str | None
        Song key as written (e.g., "Am").
    tempo : str | None
        Tempo as written (e.g., "120" or "Moderate").
    capo : int | None
        Capo fret.
    sections : tuple[Section, ...]
        All sections in source order.
    """

    title: str = DEFAULT_TITLE
    artist: str = DEFAULT_ARTIST
    language: Language = "en"
    key: str | None = None
    tempo: str | None = None
    capo: int | None = None
    sections: tuple[Section, ...] = ()

    @property
    def lines(self) -> tuple[Line, ...]:
        """All lines of all sections, in order."""
        return tuple(line for section in self.sections for line in section.lines)
