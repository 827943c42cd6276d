"""Markup cleanup for pasted and scraped chord sheets.

Tab sites wrap chords in ``[ch]...[/ch]`` and whole sheets in
``[tab]...[/tab]``. The tags take no columns in the rendered sheet, so
removing them leaves every chord above the lyric it was written over.
"""

from __future__ import annotations

import html
import re

# Closed tags anywhere, or an unterminated tag cut off at the end of a line
MARKUP_TAG_RE = re.compile(r"\[/?(?:ch|tab)(?:\]|$)", re.IGNORECASE)

TAB_SIZE = 8


def strip_markup(line: str) -> str:
    """Remove ``[ch]`` and ``[tab]`` tags from a line.

    Parameters
    ----------
    line : str
        A single line, possibly with unbalanced tags.

    Returns
    -------
    str
        The line without tags. Other bracketed text is kept.

    Examples
    --------
    >>> strip_markup("[ch]Am[/ch]    [ch]G[/ch]")
    'Am    G'
    >>> strip_markup("[tab][ch]C[/ch]")
    'C'
    >>> strip_markup("[Chorus]")
    '[Chorus]'
    >>> strip_markup("[ch]D7[/ch")
    'D7'
    """
    return MARKUP_TAG_RE.sub("", line)


def preprocess(text: str) -> list[str]:
    """Split raw sheet text into clean lines.

    Normalizes line endings, decodes HTML entities, expands tabs to spaces,
    strips markup tags and trailing whitespace. Leading whitespace is kept
    since it carries chord columns.

    Parameters
    ----------
    text : str
        The raw input text.

    Returns
    -------
    list[str]
        Lines without trailing newlines.

    Examples
    --------
    >>> preprocess("[tab]Am\\r\\nRock &amp; roll[/tab]")
    ['Am', 'Rock & roll']
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = html.unescape(text)
    return [strip_markup(line.expandtabs(TAB_SIZE)).rstrip() for line in text.split("\n")]
