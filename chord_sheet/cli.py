"""Command-line interface for chord-sheet.

Usage:
    chord-sheet parse <input_file> [-o output.json] [--pretty]
    chord-sheet chord <chord> [--transpose N]
    chord-sheet validate <sheet.json>

Examples:
    chord-sheet parse testdata/simple_pair.txt --pretty
    chord-sheet parse testdata/ocr_tesseract.json --tokens --transpose 2
    chord-sheet chord "Amin7/G" --transpose -2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from chord_sheet.converter import chord_components, to_harte
from chord_sheet.grammar import (
    chord_validation_errors,
    parse_chord,
    parse_chord_lenient,
    serialize_chord,
)
from chord_sheet.grid.tesseract import tokens_from_tesseract
from chord_sheet.models import Chord
from chord_sheet.pitch_class import transpose_chord
from chord_sheet.serialization import dumps, loads
from chord_sheet.sheet_parser.models import ChordSheet
from chord_sheet.sheet_parser.parser import parse_grid_text, parse_text, parse_tokens
from chord_sheet.transposer import transpose_sheet
from chord_sheet.validation import normalize_sheet, sheet_chord_errors, validate_sheet_strict

logger = logging.getLogger("chord_sheet")


def configure_logging(verbosity: int) -> None:
    """Log to stderr; -v for info, -vv for debug."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def load_tokens(path: Path) -> Any:
    """Read OCR tokens from JSON.

    Accepts a list of token objects, a list of blocks, or the column dict
    written by ``pytesseract.image_to_data(..., output_type=Output.DICT)``.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        return tokens_from_tesseract(data)
    if not isinstance(data, list):
        msg = "Token file must hold a list of tokens or a Tesseract data dict"
        raise ValueError(msg)
    return data


def parse_file(args: argparse.Namespace) -> ChordSheet:
    """Run the pipeline on the input file with the selected options."""
    if args.tokens:
        sheet = parse_tokens(load_tokens(args.input), title=args.title, artist=args.artist)
    else:
        text = args.input.read_text(encoding="utf-8")
        parse = parse_grid_text if args.grid else parse_text
        sheet = parse(text, title=args.title, artist=args.artist)

    if args.strict:
        for error in sheet_chord_errors(sheet):
            logger.warning(
                "%s line %d word %d: %s",
                error.section_id,
                error.line,
                error.word,
                "; ".join(error.messages),
            )
        sheet = validate_sheet_strict(sheet)

    if args.transpose:
        sheet = transpose_sheet(sheet, args.transpose)
    return sheet


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a sheet and write it as JSON."""
    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        sheet = parse_file(args)
    except (OSError, ValueError, ImportError) as e:
        print(f"Error parsing file: {e}", file=sys.stderr)
        return 1

    json_output = dumps(sheet, indent=2 if args.pretty else None)

    if args.output:
        args.output.write_text(json_output, encoding="utf-8")
        print(f"Wrote output to {args.output}")
    else:
        print(json_output)

    return 0


def chord_info(text: str, semitones: int = 0) -> dict[str, Any]:
    """Describe a chord: canonical spelling, Harte label and notes.

    Examples
    --------
    >>> chord_info("Amin7")["canonical"]
    'Am7'
    >>> chord_info("Hm")["valid"]
    False
    """
    chord = parse_chord(text)
    repaired = chord is None
    if repaired:
        chord = parse_chord_lenient(text)

    if chord is None:
        return {"input": text, "valid": False, "errors": chord_validation_errors(text)}

    chord = transpose_chord(chord, semitones)
    info: dict[str, Any] = {
        "input": text,
        "valid": True,
        "repaired": repaired,
        "canonical": serialize_chord(chord),
    }
    if isinstance(chord, Chord):
        try:
            info["harte"] = to_harte(chord)
            info["components"] = chord_components(chord)
        except ValueError as e:
            logger.info("No Harte/pychord form for %s: %s", serialize_chord(chord), e)
    return info


def cmd_chord(args: argparse.Namespace) -> int:
    """Parse, describe and optionally transpose one chord."""
    info = chord_info(args.chord, args.transpose)
    print(json.dumps(info, ensure_ascii=False, indent=2 if args.pretty else None))
    return 0 if info["valid"] else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Check every chord of a JSON sheet against the strict grammar."""
    try:
        sheet = loads(args.input.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error reading sheet: {e}", file=sys.stderr)
        return 1

    if args.normalize:
        sheet = normalize_sheet(sheet)

    errors = sheet_chord_errors(sheet)
    for error in errors:
        print(
            f"{error.section_id} line {error.line} word {error.word} "
            f"({error.chord}): {'; '.join(error.messages)}"
        )
    if errors:
        return 1

    print(f"OK: {sum(len(s.lines) for s in sheet.sections)} lines checked")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chord-sheet",
        description="Reconstruct structured chord sheets from text or OCR output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse testdata/simple_pair.txt --pretty
  %(prog)s parse scan_tokens.json --tokens -o sheet.json
  %(prog)s chord "C#m7/E" --transpose 3
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a chord sheet into JSON")
    parse_cmd.add_argument("input", type=Path, help="Input sheet (text, or JSON tokens)")
    parse_cmd.add_argument(
        "--tokens",
        action="store_true",
        help="Input is JSON OCR tokens (token list, blocks, or Tesseract data dict)",
    )
    parse_cmd.add_argument(
        "--grid",
        action="store_true",
        help="Input is text rebuilt from OCR; align chords proportionally",
    )
    parse_cmd.add_argument("--title", default=None, help="Override the sheet title")
    parse_cmd.add_argument("--artist", default=None, help="Override the sheet artist")
    parse_cmd.add_argument(
        "--transpose",
        type=int,
        default=0,
        metavar="N",
        help="Transpose by N semitones",
    )
    parse_cmd.add_argument(
        "--strict",
        action="store_true",
        help="Drop chords the strict grammar rejects (reported as warnings)",
    )
    parse_cmd.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output JSON file (default: stdout)",
    )
    parse_cmd.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parse_cmd.set_defaults(func=cmd_parse)

    chord_cmd = subparsers.add_parser("chord", help="Parse and describe a single chord")
    chord_cmd.add_argument("chord", help="Chord symbol, e.g. 'Bbmaj7'")
    chord_cmd.add_argument(
        "--transpose",
        type=int,
        default=0,
        metavar="N",
        help="Transpose by N semitones",
    )
    chord_cmd.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    chord_cmd.set_defaults(func=cmd_chord)

    validate_cmd = subparsers.add_parser("validate", help="Validate chords of a JSON sheet")
    validate_cmd.add_argument("input", type=Path, help="Chord sheet JSON file")
    validate_cmd.add_argument(
        "--normalize",
        action="store_true",
        help="Repair unparsed chord strings before validating",
    )
    validate_cmd.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
