"""Chord validation over whole sheets.

Two explicit passes share the chord grammar:

- ``normalize_sheet`` is the lenient pass for OCR and imported text: it
  repairs and parses unparsed chord strings where it can.
- ``validate_sheet_strict`` is the save-time pass: any chord the strict
  grammar rejects is removed.

``sheet_chord_errors`` reports what the strict pass would reject, for
showing to a user before saving.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from chord_sheet.grammar import (
    chord_validation_errors,
    parse_chord,
    parse_chord_lenient,
    serialize_chord,
)
from chord_sheet.models import ChordValue, SpecialChord, UnparsedChord
from chord_sheet.sheet_parser.models import ChordSheet, Line, Word

logger = logging.getLogger(__name__)

ChordMapper = Callable[[ChordValue], ChordValue | None]


@dataclass(frozen=True)
class ChordError:
    """Validation failure for one chord slot.

    Parameters
    ----------
    section_id : str
        Id of the section holding the chord.
    line : int
        Line index within the section.
    word : int
        Word index within the line.
    chord : str
        The chord as written.
    messages : tuple[str, ...]
        Human-readable reasons.
    """

    section_id: str
    line: int
    word: int
    chord: str
    messages: tuple[str, ...]


def map_chords(sheet: ChordSheet, mapper: ChordMapper) -> ChordSheet:
    """Apply ``mapper`` to every chord of a sheet.

    When the mapper returns None the chord is removed. A word left with
    neither text nor chord is dropped, as is a line left without words.

    Parameters
    ----------
    sheet : ChordSheet
        The sheet.
    mapper : ChordMapper
        Function returning the replacement chord, or None to remove it.

    Returns
    -------
    ChordSheet
        A new sheet; the input is unchanged.
    """
    sections = []
    for section in sheet.sections:
        lines = []
        for line in section.lines:
            words = []
            for word in line.words:
                chord = mapper(word.chord) if word.chord is not None else None
                if word.text or chord is not None:
                    words.append(Word(text=word.text, chord=chord))
            if words:
                lines.append(Line(words=tuple(words)))
        sections.append(replace(section, lines=tuple(lines)))
    return replace(sheet, sections=tuple(sections))


def strict_chord(chord: ChordValue) -> ChordValue | None:
    """Return the chord if the strict grammar accepts it, else None.

    Unparsed strings that are valid chords come back structured.

    Examples
    --------
    >>> strict_chord(UnparsedChord(text="Am7"))
    Chord(note='A', accidental=None, quality='minor', extension=7, add=None, \
inversion=None, inversion_accidental=None, explicit_maj=False)
    >>> strict_chord(UnparsedChord(text="Amin7?")) is None
    True
    """
    if isinstance(chord, SpecialChord):
        return chord
    if isinstance(chord, UnparsedChord):
        return parse_chord(chord.text)
    return chord if parse_chord(serialize_chord(chord)) is not None else None


def lenient_chord(chord: ChordValue) -> ChordValue:
    """Parse unparsed chord strings with the lenient grammar where possible."""
    if isinstance(chord, UnparsedChord):
        parsed = parse_chord_lenient(chord.text)
        if parsed is not None:
            return parsed
        logger.debug("Leaving unparseable chord %r as written", chord.text)
    return chord


def validate_sheet_strict(sheet: ChordSheet) -> ChordSheet:
    """Remove every chord the strict grammar rejects.

    Examples
    --------
    >>> from chord_sheet.sheet_parser.models import Section
    >>> line = Line(words=(Word("la", UnparsedChord("Hmm")), Word("da", UnparsedChord("G"))))
    >>> sheet = ChordSheet(sections=(Section("section-1", "verse", "Verse", (line,)),))
    >>> [str(w.chord) for w in validate_sheet_strict(sheet).lines[0].words]
    ['None', 'G']
    """
    return map_chords(sheet, strict_chord)


def normalize_sheet(sheet: ChordSheet) -> ChordSheet:
    """Parse unparsed chord strings leniently, keeping the ones that fail."""
    return map_chords(sheet, lenient_chord)


def sheet_chord_errors(sheet: ChordSheet) -> list[ChordError]:
    """List every chord the strict grammar rejects, with reasons.

    Examples
    --------
    >>> from chord_sheet.sheet_parser.models import Section
    >>> line = Line(words=(Word("la", UnparsedChord("C8")),))
    >>> sheet = ChordSheet(sections=(Section("section-1", "verse", "Verse", (line,)),))
    >>> sheet_chord_errors(sheet)[0].messages
    ('Invalid extension: 8. Valid extensions are: 5, 6, 7, 9, 11, 13',)
    """
    errors: list[ChordError] = []
    for section in sheet.sections:
        for line_index, line in enumerate(section.lines):
            for word_index, word in enumerate(line.words):
                if word.chord is None or isinstance(word.chord, SpecialChord):
                    continue
                text = serialize_chord(word.chord)
                messages = chord_validation_errors(text)
                if messages:
                    errors.append(
                        ChordError(
                            section_id=section.id,
                            line=line_index,
                            word=word_index,
                            chord=text,
                            messages=tuple(messages),
                        )
                    )
    return errors
