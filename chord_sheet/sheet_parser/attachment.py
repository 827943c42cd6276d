"""Chord-to-word attachment for chord sheets.

Two strategies pair a chord line with the lyric line below it:

``align``
    Proportional matching for OCR text, where character columns drift.
    Both lines are whitespace-normalised and every offset is scaled to
    [0, 1] by its line length. Each (word, chord) pair is scored on overlap
    and centre distance, and pairs are assigned greedily by score.
    Right-to-left lyrics reverse both candidate lists and use stricter
    thresholds.

``align_by_index``
    Column matching for typed text, where columns are reliable. Chords are
    consumed left to right onto words left to right, with a small column
    window for drift.

Both return exactly one ``Word`` per lyric word. The greedy assignment is a
heuristic and makes no attempt at an optimal matching.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from chord_sheet.sheet_parser.chord_detector import classify_tokens, is_rtl
from chord_sheet.sheet_parser.models import Line, Token, Word
from chord_sheet.sheet_parser.tokenizer import normalize_spacing, tokenize_line

if TYPE_CHECKING:
    from chord_sheet.models import ChordValue

logger = logging.getLogger(__name__)

# Columns a chord may sit left of its word and still belong to it
INDEX_WINDOW = 2

# Stand-in for a zero width when computing overlap ratios
MIN_WIDTH = 0.01


@dataclass(frozen=True)
class AlignmentWeights:
    """Acceptance thresholds and score weights for proportional matching.

    Parameters
    ----------
    min_overlap_ratio : float
        Overlap ratio above which a pair is accepted.
    max_distance : float
        Centre distance, as a fraction of the word width, below which a
        pair is accepted.
    overlap_weight : float
        Weight of the overlap ratio in the score.
    distance_weight : float
        Steepness of the distance penalty in the score.
    """

    min_overlap_ratio: float
    max_distance: float
    overlap_weight: float
    distance_weight: float


LTR_WEIGHTS = AlignmentWeights(
    min_overlap_ratio=0.3, max_distance=0.5, overlap_weight=3.0, distance_weight=20.0
)
RTL_WEIGHTS = AlignmentWeights(
    min_overlap_ratio=0.5, max_distance=0.3, overlap_weight=5.0, distance_weight=30.0
)


def chord_tokens(line: str, *, lenient: bool = True) -> list[Token]:
    """Tokenize a line and keep only the chord tokens.

    Examples
    --------
    >>> [(t.text, t.start) for t in chord_tokens("Am  |  G")]
    [('Am', 0), ('G', 7)]
    """
    return [t for t in classify_tokens(tokenize_line(line), lenient=lenient) if t.kind == "chord"]


def _spans(tokens: list[Token], length: int) -> tuple[np.ndarray, np.ndarray]:
    starts = np.array([t.start for t in tokens], dtype=float) / length
    ends = np.array([t.end for t in tokens], dtype=float) / length
    return starts, ends


def score_pairs(
    word_spans: tuple[np.ndarray, np.ndarray],
    chord_spans: tuple[np.ndarray, np.ndarray],
    weights: AlignmentWeights,
) -> tuple[np.ndarray, np.ndarray]:
    """Score every (word, chord) pair of normalised spans.

    Parameters
    ----------
    word_spans : tuple[np.ndarray, np.ndarray]
        Word starts and ends in [0, 1].
    chord_spans : tuple[np.ndarray, np.ndarray]
        Chord starts and ends in [0, 1].
    weights : AlignmentWeights
        Thresholds and weights to apply.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        Score matrix and acceptance mask, both shaped (words, chords).
    """
    ws, we = word_spans
    cs, ce = chord_spans
    word_width = we - ws

    overlap = np.maximum(
        0.0, np.minimum(we[:, None], ce[None, :]) - np.maximum(ws[:, None], cs[None, :])
    )
    min_width = np.minimum(word_width[:, None], (ce - cs)[None, :])
    min_width = np.where(min_width > 0, min_width, MIN_WIDTH)
    ratio = overlap / min_width

    distance = np.abs((cs + ce)[None, :] / 2 - (ws + we)[:, None] / 2)

    accepted = (ratio > weights.min_overlap_ratio) | (
        distance < weights.max_distance * word_width[:, None]
    )
    score = ratio * weights.overlap_weight + 1 / (1 + distance * weights.distance_weight)
    return score, accepted


def align(chord_line: str, lyric_line: str, *, lenient: bool = True) -> list[Word]:
    """Align the chords of a chord line to the words of a lyric line.

    Parameters
    ----------
    chord_line : str
        The line of chords.
    lyric_line : str
        The lyric line below it.
    lenient : bool
        Use the lenient chord parser for chord tokens.

    Returns
    -------
    list[Word]
        One word per lyric word, in source order. Words without an
        acceptable chord have ``chord=None``.

    Examples
    --------
    >>> words = align("C       Am      F", "Hello   my      friend")
    >>> [(w.text, str(w.chord)) for w in words]
    [('Hello', 'C'), ('my', 'Am'), ('friend', 'F')]
    """
    chord_text = normalize_spacing(chord_line)
    lyric_text = normalize_spacing(lyric_line)
    chords = chord_tokens(chord_text, lenient=lenient)
    words = tokenize_line(lyric_text)

    if not chords or not words:
        return [Word(text=w.text) for w in words]

    rtl = is_rtl(lyric_text)
    weights = RTL_WEIGHTS if rtl else LTR_WEIGHTS

    # Candidate order: right to left for RTL lyrics
    word_order = np.arange(len(words))
    chord_order = np.arange(len(chords))
    if rtl:
        word_order = word_order[::-1]
        chord_order = chord_order[::-1]

    ws, we = _spans(words, len(lyric_text))
    cs, ce = _spans(chords, len(chord_text))
    score, accepted = score_pairs(
        (ws[word_order], we[word_order]),
        (cs[chord_order], ce[chord_order]),
        weights,
    )

    rows, cols = np.nonzero(accepted)
    ranking = np.argsort(-score[rows, cols], kind="stable")

    assigned: dict[int, ChordValue] = {}
    used: set[int] = set()
    for k in ranking:
        word_index = int(word_order[rows[k]])
        chord_index = int(chord_order[cols[k]])
        if word_index in assigned or chord_index in used:
            continue
        chord = chords[chord_index].chord
        if chord is not None:
            assigned[word_index] = chord
            used.add(chord_index)

    dropped = len(chords) - len(used)
    if dropped:
        logger.debug("Proportional alignment left %d chord(s) unassigned", dropped)

    return [Word(text=w.text, chord=assigned.get(i)) for i, w in enumerate(words)]


def align_by_index(
    chord_line: str,
    lyric_line: str,
    window: int = INDEX_WINDOW,
    *,
    lenient: bool = True,
) -> list[Word]:
    """Align chords to words by column, left to right.

    Each chord goes to the last remaining word that starts no more than
    ``window`` columns right of the chord, or to the next remaining word if
    none does. Once a word holds a chord, later chords move on to the words
    after it. Chords left with no word are dropped.

    Parameters
    ----------
    chord_line : str
        The raw chord line.
    lyric_line : str
        The raw lyric line.
    window : int
        Column drift tolerated between a chord and its word.
    lenient : bool
        Use the lenient chord parser for chord tokens.

    Returns
    -------
    list[Word]
        One word per lyric word, in source order.

    Examples
    --------
    >>> words = align_by_index("G        C", "Over the hill")
    >>> [(w.text, str(w.chord) if w.chord else None) for w in words]
    [('Over', 'G'), ('the', None), ('hill', 'C')]
    """
    words = tokenize_line(lyric_line)
    slots: list[ChordValue | None] = [None] * len(words)
    cursor = 0

    for token in chord_tokens(chord_line, lenient=lenient):
        if cursor >= len(words):
            logger.debug("No word left for chord %r at column %d", token.text, token.start)
            continue

        target = cursor
        for i in range(cursor, len(words)):
            if words[i].start - window > token.start:
                break
            target = i

        slots[target] = token.chord
        cursor = target + 1

    return [Word(text=w.text, chord=slot) for w, slot in zip(words, slots)]


def chord_only_line(line: str, *, lenient: bool = True) -> Line:
    """Build a line of chords with no lyrics (intro, instrumental).

    Examples
    --------
    >>> line = chord_only_line("Am   G   F")
    >>> [(w.text, str(w.chord)) for w in line.words]
    [('', 'Am'), ('', 'G'), ('', 'F')]
    """
    chords = chord_tokens(line, lenient=lenient)
    return Line(words=tuple(Word(text="", chord=t.chord) for t in chords))


def lyric_only_line(line: str) -> Line:
    """Build a line of words with no chords."""
    return Line(words=tuple(Word(text=w.text) for w in tokenize_line(line)))
