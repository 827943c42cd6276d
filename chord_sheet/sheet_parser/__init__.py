"""Chord sheet parser for chord/lyric alignment.

This module turns plain-text or OCR-rebuilt chord sheets into structured
documents with section detection and chord-to-word alignment.
"""

from chord_sheet.sheet_parser.attachment import (
    align,
    align_by_index,
    chord_only_line,
    lyric_only_line,
)
from chord_sheet.sheet_parser.chord_detector import (
    classify_line,
    is_chord_line,
    is_chord_token,
    is_rtl,
)
from chord_sheet.sheet_parser.markup import preprocess, strip_markup
from chord_sheet.sheet_parser.metadata import SheetMetadata, detect_language, extract_metadata
from chord_sheet.sheet_parser.models import (
    ChordSheet,
    Line,
    Section,
    Token,
    Word,
)
from chord_sheet.sheet_parser.parser import (
    PipelineConfig,
    merge_sheets,
    parse_grid_text,
    parse_text,
    parse_tokens,
)
from chord_sheet.sheet_parser.sections import SectionAssembler, SectionHeader, match_header

__all__ = [
    "ChordSheet",
    "Line",
    "PipelineConfig",
    "Section",
    "SectionAssembler",
    "SectionHeader",
    "SheetMetadata",
    "Token",
    "Word",
    "align",
    "align_by_index",
    "chord_only_line",
    "classify_line",
    "detect_language",
    "extract_metadata",
    "is_chord_line",
    "is_chord_token",
    "is_rtl",
    "lyric_only_line",
    "match_header",
    "merge_sheets",
    "parse_grid_text",
    "parse_text",
    "parse_tokens",
    "preprocess",
    "strip_markup",
]
