"""Chord detection and line classification for chord sheets.

This module classifies tokens against the chord grammar and decides
whether a line of text is a chord line, a lyric line, a section header or
empty.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from chord_sheet.grammar import parse_chord, parse_chord_lenient
from chord_sheet.sheet_parser.models import LineKind, Token
from chord_sheet.sheet_parser.sections import match_header

if TYPE_CHECKING:
    from chord_sheet.models import Chord, SpecialChord

logger = logging.getLogger(__name__)

# A line is a chord line when more than this fraction of its tokens are chords
CHORD_LINE_THRESHOLD = 0.3

# ...or when it has chords and at most this many other tokens
MAX_OTHER_TOKENS = 3

# Hebrew, Arabic, Syriac, Arabic supplements and presentation forms
RTL_RE = re.compile(
    "[\u0590-\u05FF\u0600-\u06FF\u0700-\u074F\u0750-\u077F"
    "\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]"
)


def parse_chord_token(text: str, *, lenient: bool = True) -> Chord | SpecialChord | None:
    """Parse a single token as a chord.

    Parameters
    ----------
    text : str
        The token text.
    lenient : bool
        Repair OCR-garbled spellings before giving up.

    Returns
    -------
    Chord | SpecialChord | None
        The parsed chord, or None if the token is not a chord.

    Examples
    --------
    >>> str(parse_chord_token("Gmin7"))
    'Gm7'
    >>> parse_chord_token("Hello") is None
    True
    """
    return parse_chord_lenient(text) if lenient else parse_chord(text)


def is_chord_token(text: str, *, lenient: bool = True) -> bool:
    """Check if a token is a chord.

    Examples
    --------
    >>> is_chord_token("C/E")
    True
    >>> is_chord_token("the")
    False
    """
    return parse_chord_token(text, lenient=lenient) is not None


def classify_token(token: Token, *, lenient: bool = True) -> Token:
    """Classify a single token as chord, word, punct, or other.

    Parameters
    ----------
    token : Token
        The token to classify.
    lenient : bool
        Use the lenient chord parser.

    Returns
    -------
    Token
        A new token with updated kind and chord fields.

    Examples
    --------
    >>> t = Token(text="Gm7", start=0, end=3)
    >>> classify_token(t).kind
    'chord'
    >>> classify_token(Token(text="--", start=0, end=2)).kind
    'punct'
    """
    text = token.text

    chord = parse_chord_token(text, lenient=lenient)
    if chord is not None:
        return Token(text=text, start=token.start, end=token.end, kind="chord", chord=chord)

    if all(not c.isalnum() for c in text):
        return Token(text=text, start=token.start, end=token.end, kind="punct")

    if any(c.isalpha() for c in text):
        return Token(text=text, start=token.start, end=token.end, kind="word")

    return Token(text=text, start=token.start, end=token.end, kind="other")


def classify_tokens(tokens: list[Token], *, lenient: bool = True) -> list[Token]:
    """Classify all tokens in a list."""
    return [classify_token(t, lenient=lenient) for t in tokens]


def is_chord_line(
    line: str,
    threshold: float = CHORD_LINE_THRESHOLD,
    max_other_tokens: int = MAX_OTHER_TOKENS,
    *,
    lenient: bool = True,
) -> bool:
    """Decide whether a line is mostly chords.

    A line is a chord line when the fraction of its whitespace-separated
    tokens that parse as chords exceeds ``threshold``, or when it holds at
    least one chord and no more than ``max_other_tokens`` other tokens.

    Short lyric lines made of chord-like words ("A little love") pass the
    second test. With ``lenient`` the repair of truncated ``dim`` also
    reads words such as "Adi" or "Edi" as chords. Raise the thresholds or
    pass ``lenient=False`` for sheets where this matters.

    Parameters
    ----------
    line : str
        The line to check.
    threshold : float
        Chord ratio a chord line must exceed.
    max_other_tokens : int
        Non-chord tokens tolerated on a line that has chords.
    lenient : bool
        Use the lenient chord parser.

    Returns
    -------
    bool
        True if the line is a chord line.

    Examples
    --------
    >>> is_chord_line("C Am F G")
    True
    >>> is_chord_line("The quick brown fox jumped C")
    False
    >>> is_chord_line("")
    False
    """
    tokens = line.split()
    if not tokens:
        return False

    chords = sum(1 for t in tokens if is_chord_token(t, lenient=lenient))
    if chords == 0:
        return False
    return chords / len(tokens) > threshold or len(tokens) - chords <= max_other_tokens


def classify_line(
    line: str,
    threshold: float = CHORD_LINE_THRESHOLD,
    max_other_tokens: int = MAX_OTHER_TOKENS,
    *,
    lenient: bool = True,
) -> LineKind:
    """Classify a line based on its content.

    Headers take precedence over chords, so "[Intro]" and "Chorus:" are
    never read as chord lines.

    Parameters
    ----------
    line : str
        The line to classify.
    threshold : float
        See ``is_chord_line``.
    max_other_tokens : int
        See ``is_chord_line``.
    lenient : bool
        Use the lenient chord parser.

    Returns
    -------
    LineKind
        The line classification.

    Examples
    --------
    >>> classify_line("")
    'empty'
    >>> classify_line("[Verse 1]")
    'header'
    >>> classify_line("G   D/F#   Em")
    'chord'
    >>> classify_line("Walking down the winding road")
    'lyric'
    """
    if not line.strip():
        return "empty"
    if match_header(line) is not None:
        return "header"
    if is_chord_line(line, threshold, max_other_tokens, lenient=lenient):
        return "chord"
    return "lyric"


def is_rtl(text: str) -> bool:
    """Check whether text contains right-to-left script characters.

    Examples
    --------
    >>> is_rtl("שלום עולם")
    True
    >>> is_rtl("Hello world")
    False
    """
    return RTL_RE.search(text) is not None


def reverse_rtl_words(line: str) -> str:
    """Reverse the characters of each right-to-left word in a line.

    Grid reconstruction lays glyphs out in visual order, left to right,
    which leaves Hebrew and Arabic words spelled backwards. Whitespace and
    left-to-right words are kept as they are.

    Examples
    --------
    >>> reverse_rtl_words("םולש  Am")
    'שלום  Am'
    """
    parts = re.split(r"(\s+)", line)
    return "".join(part[::-1] if is_rtl(part) else part for part in parts)
