"""Main chord sheet parser orchestration.

This module provides the entry points that run the full pipeline:

- ``parse_text`` for typed or pasted sheets, where columns are reliable
  and chords are matched to words by column.
- ``parse_grid_text`` for text rebuilt from OCR, where chords are matched
  to words proportionally.
- ``parse_tokens`` for raw positioned OCR tokens.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from functools import partial

from chord_sheet.grid.reconstructor import MIN_CONFIDENCE, TokenInput, reconstruct_text
from chord_sheet.sheet_parser.attachment import (
    INDEX_WINDOW,
    align,
    align_by_index,
    chord_only_line,
    lyric_only_line,
)
from chord_sheet.sheet_parser.chord_detector import (
    CHORD_LINE_THRESHOLD,
    MAX_OTHER_TOKENS,
    classify_line,
    reverse_rtl_words,
)
from chord_sheet.sheet_parser.markup import preprocess
from chord_sheet.sheet_parser.metadata import detect_language, extract_metadata
from chord_sheet.sheet_parser.models import (
    DEFAULT_ARTIST,
    DEFAULT_TITLE,
    ChordSheet,
    Line,
    LineKind,
    Section,
    Word,
)
from chord_sheet.sheet_parser.sections import SectionAssembler, match_header

logger = logging.getLogger(__name__)

Aligner = Callable[[str, str], list[Word]]


@dataclass(frozen=True)
class PipelineConfig:
    """Tunable thresholds for a pipeline run.

    Parameters
    ----------
    chord_line_threshold : float
        Chord ratio a chord line must exceed.
    max_other_tokens : int
        Non-chord tokens tolerated on a line that has chords.
    min_confidence : float
        OCR tokens at or below this confidence are discarded.
    index_window : int
        Column drift tolerated by column alignment.
    lenient : bool
        Repair OCR-garbled chord spellings before parsing.
    """

    chord_line_threshold: float = CHORD_LINE_THRESHOLD
    max_other_tokens: int = MAX_OTHER_TOKENS
    min_confidence: float = MIN_CONFIDENCE
    index_window: int = INDEX_WINDOW
    lenient: bool = True


DEFAULT_CONFIG = PipelineConfig()


def classify_lines(lines: Sequence[str], config: PipelineConfig = DEFAULT_CONFIG) -> list[LineKind]:
    """Classify every line with the configured thresholds."""
    return [
        classify_line(
            line,
            config.chord_line_threshold,
            config.max_other_tokens,
            lenient=config.lenient,
        )
        for line in lines
    ]


def assemble_sections(
    lines: Sequence[str],
    aligner: Aligner,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> tuple[Section, ...]:
    """Pair chord and lyric lines and group them into sections.

    A chord line directly followed by a lyric line becomes one aligned
    line. A chord line with no lyric below becomes a chord-only line, and a
    lyric line with no chords above becomes a chord-free line.

    Parameters
    ----------
    lines : Sequence[str]
        Preprocessed sheet lines, metadata removed.
    aligner : Aligner
        Function pairing a chord line with a lyric line.
    config : PipelineConfig
        Classification thresholds.

    Returns
    -------
    tuple[Section, ...]
        Sections in source order.
    """
    kinds = classify_lines(lines, config)
    assembler = SectionAssembler()
    i = 0
    n = len(lines)

    while i < n:
        line = lines[i]
        kind = kinds[i]

        if kind == "empty":
            i += 1
            continue

        if kind == "header":
            header = match_header(line)
            if header is not None:
                assembler.add_header(header)
                if header.chords:
                    chords = chord_only_line(" ".join(header.chords), lenient=config.lenient)
                    if chords.words:
                        assembler.add_line(chords)
            i += 1
            continue

        if kind == "chord":
            if i + 1 < n and kinds[i + 1] == "lyric":
                logger.debug("Aligning %r over %r", line.strip(), lines[i + 1].strip())
                words = aligner(line, lines[i + 1])
                assembler.add_line(Line(words=tuple(words)))
                i += 2
                continue

            chords = chord_only_line(line, lenient=config.lenient)
            if chords.words:
                assembler.add_line(chords)
            i += 1
            continue

        assembler.add_line(lyric_only_line(line))
        i += 1

    return assembler.finish()


def _build_sheet(
    text: str,
    aligner: Aligner,
    title: str | None,
    artist: str | None,
    config: PipelineConfig,
) -> ChordSheet:
    metadata, body = extract_metadata(preprocess(text))
    sections = assemble_sections(body, aligner, config)
    logger.debug("Parsed %d section(s)", len(sections))
    return ChordSheet(
        title=title or metadata.title or DEFAULT_TITLE,
        artist=artist or metadata.artist or DEFAULT_ARTIST,
        language=detect_language("\n".join(body)),
        key=metadata.key,
        tempo=metadata.tempo,
        capo=metadata.capo,
        sections=sections,
    )


def parse_text(
    text: str,
    *,
    title: str | None = None,
    artist: str | None = None,
    config: PipelineConfig | None = None,
) -> ChordSheet:
    """Parse a typed or pasted chord sheet.

    Chords are matched to words by column (``align_by_index``).

    Parameters
    ----------
    text : str
        The raw sheet text, optionally with ``[ch]``/``[tab]`` markup.
    title : str | None
        Title override. Defaults to a ``Title:`` line, else "Untitled".
    artist : str | None
        Artist override. Defaults to an ``Artist:`` line, else "Unknown".
    config : PipelineConfig | None
        Pipeline thresholds.

    Returns
    -------
    ChordSheet
        The parsed sheet. Empty input gives a sheet with no sections.

    Examples
    --------
    >>> sheet = parse_text('''[Verse]
    ... G        C
    ... Over the hill
    ... ''')
    >>> sheet.sections[0].label
    'Verse'
    >>> [(w.text, str(w.chord) if w.chord else None) for w in sheet.sections[0].lines[0].words]
    [('Over', 'G'), ('the', None), ('hill', 'C')]
    """
    config = config or DEFAULT_CONFIG
    aligner = partial(align_by_index, window=config.index_window, lenient=config.lenient)
    return _build_sheet(text, aligner, title, artist, config)


def parse_grid_text(
    text: str,
    *,
    title: str | None = None,
    artist: str | None = None,
    config: PipelineConfig | None = None,
) -> ChordSheet:
    """Parse text rebuilt from OCR.

    Same as ``parse_text``, but chords are matched to words proportionally
    (``align``), which tolerates the column drift OCR introduces.
    """
    config = config or DEFAULT_CONFIG
    aligner = partial(align, lenient=config.lenient)
    return _build_sheet(text, aligner, title, artist, config)


def parse_tokens(
    tokens: Sequence[TokenInput] | Sequence[Sequence[TokenInput]],
    *,
    title: str | None = None,
    artist: str | None = None,
    config: PipelineConfig | None = None,
) -> ChordSheet:
    """Parse positioned OCR tokens.

    Low-confidence tokens are dropped, the text grid is rebuilt block by
    block, right-to-left words are put back in reading order, and the
    result goes through ``parse_grid_text``.

    Parameters
    ----------
    tokens : Sequence[TokenInput] | Sequence[Sequence[TokenInput]]
        Flat token list or pre-partitioned blocks. Tokens may be mappings.
    title : str | None
        Title override.
    artist : str | None
        Artist override.
    config : PipelineConfig | None
        Pipeline thresholds.

    Returns
    -------
    ChordSheet
        The parsed sheet.

    Raises
    ------
    ValueError
        If a token mapping is missing a required field.
    """
    config = config or DEFAULT_CONFIG
    text = reconstruct_text(tokens, min_confidence=config.min_confidence)
    text = "\n".join(reverse_rtl_words(line) for line in text.split("\n"))
    return parse_grid_text(text, title=title, artist=artist, config=config)


def merge_sheets(sheets: Iterable[ChordSheet]) -> ChordSheet:
    """Combine the sheets of a multi-page import into one.

    Sections are concatenated in page order and renumbered. Metadata comes
    from the first page that has it.

    Examples
    --------
    >>> first = parse_text("[Verse]\\nAm\\nla la")
    >>> second = parse_text("[Chorus]\\nG\\nhey")
    >>> [s.id for s in merge_sheets([first, second]).sections]
    ['section-1', 'section-2']
    """
    pages = list(sheets)
    if not pages:
        return ChordSheet()

    sections = [section for sheet in pages for section in sheet.sections]
    sections = [replace(s, id=f"section-{i}") for i, s in enumerate(sections, start=1)]

    def first(attr: str, default: object) -> object:
        for sheet in pages:
            value = getattr(sheet, attr)
            if value is not None and value != default:
                return value
        return default

    return ChordSheet(
        title=first("title", DEFAULT_TITLE),
        artist=first("artist", DEFAULT_ARTIST),
        language=first("language", "en"),
        key=first("key", None),
        tempo=first("tempo", None),
        capo=first("capo", None),
        sections=tuple(sections),
    )
