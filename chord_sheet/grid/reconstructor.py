"""Rebuild whitespace-faithful text from positioned OCR tokens.

OCR returns boxes, not columns. Tokens are grouped into lines by their
vertical centre, each line is ordered left to right, and the horizontal
gaps between boxes are turned back into runs of spaces using the line's
median token width as a character width. Each spatial block (e.g. a page
column) is rebuilt on its own so text from one column never bleeds into
another.

Examples
--------
>>> from chord_sheet.grid.models import PositionedToken
>>> tokens = [
...     PositionedToken("A", x=0, y=0, width=10, height=10, confidence=90),
...     PositionedToken("m", x=10, y=0, width=10, height=10, confidence=90),
...     PositionedToken("G", x=60, y=1, width=10, height=10, confidence=90),
... ]
>>> reconstruct_block(tokens)
'Am     G'
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from chord_sheet.grid.models import PositionedToken

logger = logging.getLogger(__name__)

# Tokens at or below this confidence are discarded
MIN_CONFIDENCE = 30.0

# Vertical tolerance, as a fraction of the running mean line height
LINE_TOLERANCE = 0.6

# A gap wider than this fraction of the character width is a space
SPACE_THRESHOLD = 0.6

# Each space accounts for this fraction of the character width
SPACE_WIDTH = 0.8

BLOCK_SEPARATOR = "\n\n"

TokenInput = PositionedToken | Mapping[str, Any]


def coerce_tokens(tokens: Iterable[TokenInput]) -> list[PositionedToken]:
    """Convert mappings to ``PositionedToken`` objects.

    Raises
    ------
    ValueError
        If a mapping is missing a required field.
    """
    return [
        token if isinstance(token, PositionedToken) else PositionedToken.from_dict(token)
        for token in tokens
    ]


def filter_tokens(
    tokens: Iterable[PositionedToken],
    min_confidence: float = MIN_CONFIDENCE,
) -> list[PositionedToken]:
    """Keep tokens with confidence above ``min_confidence`` and visible text.

    Examples
    --------
    >>> low = PositionedToken("x", 0, 0, 5, 5, confidence=30)
    >>> high = PositionedToken("C", 0, 0, 5, 5, confidence=31)
    >>> [t.text for t in filter_tokens([low, high])]
    ['C']
    """
    return [t for t in tokens if t.confidence > min_confidence and t.text.strip()]


def partition_blocks(tokens: Iterable[PositionedToken]) -> list[list[PositionedToken]]:
    """Group tokens by block, keeping blocks in first-seen order."""
    blocks: dict[int, list[PositionedToken]] = {}
    for token in tokens:
        blocks.setdefault(token.block, []).append(token)
    return list(blocks.values())


def cluster_lines(tokens: Iterable[PositionedToken]) -> list[list[PositionedToken]]:
    """Group tokens into text lines by vertical centre.

    Tokens are visited top to bottom. A token joins the current line when
    its centre lies within ``LINE_TOLERANCE`` times the line's mean height
    of the line's mean centre; otherwise it starts a new line. Both means
    are updated as tokens join.

    Parameters
    ----------
    tokens : Iterable[PositionedToken]
        Tokens of a single block.

    Returns
    -------
    list[list[PositionedToken]]
        Lines top to bottom, tokens in visiting order.
    """
    lines: list[list[PositionedToken]] = []
    current: list[PositionedToken] = []
    mean_center = 0.0
    mean_height = 0.0

    for token in sorted(tokens, key=lambda t: t.center_y):
        if current and abs(token.center_y - mean_center) < LINE_TOLERANCE * mean_height:
            current.append(token)
            n = len(current)
            mean_center += (token.center_y - mean_center) / n
            mean_height += (token.height - mean_height) / n
            continue

        if current:
            lines.append(current)
        current = [token]
        mean_center = token.center_y
        mean_height = token.height

    if current:
        lines.append(current)
    return lines


def render_line(tokens: Sequence[PositionedToken]) -> str:
    """Render one line of tokens, turning gaps into spaces.

    Parameters
    ----------
    tokens : Sequence[PositionedToken]
        Tokens of a single line, in any order.

    Returns
    -------
    str
        The line text with whitespace reinstated.

    Examples
    --------
    >>> tokens = [
    ...     PositionedToken("C", x=0, y=0, width=10, height=10, confidence=90),
    ...     PositionedToken("F", x=50, y=0, width=10, height=10, confidence=90),
    ... ]
    >>> render_line(tokens)
    'C     F'
    """
    if not tokens:
        return ""

    ordered = sorted(tokens, key=lambda t: t.x)
    widths = sorted(t.width for t in ordered)
    char_width = widths[len(widths) // 2] or 1.0

    parts = [ordered[0].text]
    for prev, token in zip(ordered, ordered[1:]):
        gap = token.x - prev.right
        if gap > SPACE_THRESHOLD * char_width:
            parts.append(" " * max(1, math.floor(gap / (SPACE_WIDTH * char_width))))
        parts.append(token.text)
    return "".join(parts)


def reconstruct_block(tokens: Iterable[PositionedToken]) -> str:
    """Reconstruct a single block as newline-joined lines."""
    return "\n".join(render_line(line) for line in cluster_lines(tokens))


def reconstruct_blocks(blocks: Iterable[Iterable[PositionedToken]]) -> list[str]:
    """Reconstruct each block independently, skipping empty blocks."""
    texts: list[str] = []
    for index, block in enumerate(blocks):
        tokens = list(block)
        if not tokens:
            logger.debug("Skipping empty block %d", index)
            continue
        texts.append(reconstruct_block(tokens))
    return texts


def reconstruct_text(
    tokens: Sequence[TokenInput] | Sequence[Sequence[TokenInput]],
    *,
    min_confidence: float = MIN_CONFIDENCE,
) -> str:
    """Reconstruct the full text of an OCR result.

    Parameters
    ----------
    tokens : Sequence[TokenInput] | Sequence[Sequence[TokenInput]]
        Either a flat token list (partitioned by each token's ``block``) or
        a list of pre-partitioned blocks. Tokens may be mappings.
    min_confidence : float
        Tokens at or below this confidence are dropped first.

    Returns
    -------
    str
        Block texts joined by a blank line.

    Raises
    ------
    ValueError
        If a token mapping is missing a required field.
    """
    if not tokens:
        return ""

    first = tokens[0]
    if isinstance(first, (PositionedToken, Mapping)):
        blocks = partition_blocks(filter_tokens(coerce_tokens(tokens), min_confidence))
    else:
        blocks = [filter_tokens(coerce_tokens(block), min_confidence) for block in tokens]

    texts = reconstruct_blocks(blocks)
    logger.debug("Reconstructed %d block(s) from OCR tokens", len(texts))
    return BLOCK_SEPARATOR.join(texts)
