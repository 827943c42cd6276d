"""Chord sheet library for reconstructing chords-over-lyrics documents.

This library turns plain-text or OCR chord sheets into structured documents
in which every chord is attached to the lyric word it is played on. It also
provides the chord grammar, transposition and conversion between chord
notations (pychord's "Gm7" and Harte's "G:min7").

Examples
--------
>>> from chord_sheet import parse_chord, serialize_chord, transpose_chord

>>> # Parse and canonicalize a chord
>>> serialize_chord(parse_chord("Amin7"))
'Am7'

>>> # Transpose up a minor third
>>> serialize_chord(transpose_chord(parse_chord("Bb/D"), 3))
'C#/F'

>>> # Parse a sheet
>>> from chord_sheet import parse_text
>>> sheet = parse_text("G        C\\nOver the hill")
>>> [w.text for w in sheet.lines[0].words if w.chord]
['Over', 'hill']
"""

from chord_sheet.converter import (
    chord_components,
    from_harte,
    from_pychord,
    harte_quality_to_pychord,
    pychord_quality_to_harte,
    to_harte,
    to_pychord,
)
from chord_sheet.grammar import (
    chord_validation_errors,
    is_chord,
    parse_chord,
    parse_chord_lenient,
    serialize_chord,
)
from chord_sheet.models import Chord, ChordValue, SpecialChord, UnparsedChord
from chord_sheet.pitch_class import note_to_pc, pc_to_note, transpose_chord
from chord_sheet.serialization import dumps, loads, sheet_from_dict, sheet_to_dict
from chord_sheet.sheet_parser import (
    ChordSheet,
    Line,
    PipelineConfig,
    Section,
    Word,
    merge_sheets,
    parse_grid_text,
    parse_text,
    parse_tokens,
)
from chord_sheet.transposer import transpose_key, transpose_sheet
from chord_sheet.validation import normalize_sheet, sheet_chord_errors, validate_sheet_strict

__all__ = [
    "Chord",
    "ChordSheet",
    "ChordValue",
    "Line",
    "PipelineConfig",
    "Section",
    "SpecialChord",
    "UnparsedChord",
    "Word",
    "chord_components",
    "chord_validation_errors",
    "dumps",
    "from_harte",
    "from_pychord",
    "harte_quality_to_pychord",
    "is_chord",
    "loads",
    "merge_sheets",
    "normalize_sheet",
    "note_to_pc",
    "parse_chord",
    "parse_chord_lenient",
    "parse_grid_text",
    "parse_text",
    "parse_tokens",
    "pc_to_note",
    "pychord_quality_to_harte",
    "serialize_chord",
    "sheet_chord_errors",
    "sheet_from_dict",
    "sheet_to_dict",
    "to_harte",
    "to_pychord",
    "transpose_chord",
    "transpose_key",
    "transpose_sheet",
    "validate_sheet_strict",
]
