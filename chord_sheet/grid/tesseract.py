"""Adapter from Tesseract OCR output to positioned tokens.

This module requires the optional pytesseract dependency. Install with:
    pip install chord-sheet[ocr]

Only ``recognize_image`` calls Tesseract; ``tokens_from_tesseract`` works on
the plain dict returned by ``pytesseract.image_to_data`` and needs no OCR
engine.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from chord_sheet.grid.models import PositionedToken

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("text", "left", "top", "width", "height", "conf")

# Hebrew and English, matching the sheets this library targets
DEFAULT_LANGUAGES = "heb+eng"

# Keep inter-word spacing: page segmentation mode 6 (single uniform block)
DEFAULT_CONFIG = "--psm 6 -c preserve_interword_spaces=1"


def _split_word(token: PositionedToken) -> list[PositionedToken]:
    """Divide a word box evenly into one box per character."""
    n = len(token.text)
    if n <= 1:
        return [token]
    step = token.width / n
    return [
        PositionedToken(
            text=char,
            x=token.x + i * step,
            y=token.y,
            width=step,
            height=token.height,
            confidence=token.confidence,
            block=token.block,
        )
        for i, char in enumerate(token.text)
    ]


def tokens_from_tesseract(
    data: Mapping[str, Sequence[Any]],
    *,
    split_words: bool = True,
) -> list[PositionedToken]:
    """Convert ``image_to_data`` dict output into positioned tokens.

    Rows with blank text (page, block, paragraph and line rows) are skipped.
    Tesseract's ``block_num`` becomes the token block.

    Parameters
    ----------
    data : Mapping[str, Sequence[Any]]
        Column-oriented dict as returned by
        ``pytesseract.image_to_data(image, output_type=Output.DICT)``.
    split_words : bool
        Split each word box evenly into per-character tokens, so the grid
        reconstructor's width estimate is a character width.

    Returns
    -------
    list[PositionedToken]
        Tokens in Tesseract's reading order. Confidence filtering is left to
        the caller.

    Raises
    ------
    ValueError
        If a column is missing or the columns differ in length.

    Examples
    --------
    >>> data = {
    ...     "text": ["", "Am"], "left": [0, 10], "top": [0, 5],
    ...     "width": [100, 20], "height": [40, 12], "conf": [-1, 88.5],
    ...     "block_num": [1, 1],
    ... }
    >>> [(t.text, t.x, t.width) for t in tokens_from_tesseract(data)]
    [('A', 10.0, 10.0), ('m', 20.0, 10.0)]
    """
    missing = [column for column in REQUIRED_COLUMNS if column not in data]
    if missing:
        msg = f"Tesseract data is missing columns: {', '.join(missing)}"
        raise ValueError(msg)

    n = len(data["text"])
    columns = [*REQUIRED_COLUMNS, *(("block_num",) if "block_num" in data else ())]
    uneven = [column for column in columns if len(data[column]) != n]
    if uneven:
        msg = f"Tesseract columns differ in length: {', '.join(uneven)}"
        raise ValueError(msg)

    blocks = data.get("block_num", [0] * n)
    tokens: list[PositionedToken] = []
    for i in range(n):
        text = str(data["text"][i]).strip()
        if not text:
            continue
        token = PositionedToken.from_dict(
            {
                "text": text,
                "x": data["left"][i],
                "y": data["top"][i],
                "width": data["width"][i],
                "height": data["height"][i],
                "confidence": data["conf"][i],
                "block": blocks[i],
            }
        )
        tokens.extend(_split_word(token) if split_words else [token])

    logger.debug("Converted %d Tesseract rows into %d tokens", n, len(tokens))
    return tokens


def recognize_image(
    image: Any,
    *,
    lang: str = DEFAULT_LANGUAGES,
    config: str = DEFAULT_CONFIG,
    split_words: bool = True,
) -> list[PositionedToken]:
    """Run Tesseract on an image and return positioned tokens.

    Parameters
    ----------
    image : Any
        Anything pytesseract accepts (PIL image, numpy array, file path).
    lang : str
        Tesseract language codes.
    config : str
        Extra Tesseract command-line configuration.
    split_words : bool
        Passed to ``tokens_from_tesseract``.

    Returns
    -------
    list[PositionedToken]
        Recognized tokens.

    Raises
    ------
    ImportError
        If pytesseract is not installed.
    """
    try:
        import pytesseract
    except ImportError:
        msg = "pytesseract is required for OCR. Install with: pip install chord-sheet[ocr]"
        raise ImportError(msg) from None

    data = pytesseract.image_to_data(
        image,
        lang=lang,
        config=config,
        output_type=pytesseract.Output.DICT,
    )
    return tokens_from_tesseract(data, split_words=split_words)
