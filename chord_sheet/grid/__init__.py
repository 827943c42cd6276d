"""Grid reconstruction for OCR output.

This module rebuilds whitespace-faithful text from spatially positioned
OCR tokens, one text block per spatial block, so that chord columns still
line up over their lyrics after recognition.
"""

from chord_sheet.grid.models import PositionedToken
from chord_sheet.grid.reconstructor import (
    cluster_lines,
    filter_tokens,
    partition_blocks,
    reconstruct_block,
    reconstruct_blocks,
    reconstruct_text,
    render_line,
)
from chord_sheet.grid.tesseract import recognize_image, tokens_from_tesseract

__all__ = [
    "PositionedToken",
    "cluster_lines",
    "filter_tokens",
    "partition_blocks",
    "recognize_image",
    "reconstruct_block",
    "reconstruct_blocks",
    "reconstruct_text",
    "render_line",
    "tokens_from_tesseract",
]
