"""Column-aware tokenizer for chord sheets.

Chord lines only make sense next to the lyric line below them, so tokens
keep the columns they were found at. Classification happens later in
``chord_detector``.
"""

import re

from chord_sheet.sheet_parser.models import Token

WHITESPACE_RE = re.compile(r"\s+")


def tokenize_line(line: str) -> list[Token]:
    """Tokenize a line preserving column spans.

    Splits on whitespace while tracking the start and end column of each
    token. The line is not stripped, so columns match the raw line.

    Parameters
    ----------
    line : str
        The line to tokenize. Should not include newline characters.

    Returns
    -------
    list[Token]
        Tokens with text, start (inclusive), end (exclusive) and kind set
        to "other".

    Examples
    --------
    >>> tokens = tokenize_line("Gm     C")
    >>> [(t.text, t.start, t.end) for t in tokens]
    [('Gm', 0, 2), ('C', 7, 8)]

    >>> tokens = tokenize_line("  Hello  world")
    >>> [(t.text, t.start, t.end) for t in tokens]
    [('Hello', 2, 7), ('world', 9, 14)]
    """
    return [
        Token(text=match.group(0), start=match.start(), end=match.end())
        for match in re.finditer(r"\S+", line)
    ]


def normalize_spacing(line: str) -> str:
    """Collapse runs of whitespace to single spaces and trim.

    Examples
    --------
    >>> normalize_spacing("  Am    G  ")
    'Am G'
    """
    return WHITESPACE_RE.sub(" ", line).strip()
