"""Section header detection and section assembly.

A header is a bracketed line (``[Verse 1]``, any label), a colon-suffixed
line starting with a section keyword (``Chorus:``, ``פזמון:``), or a bare
keyword with an optional number (``CHORUS``, ``Verse 2``). A keyword
header may carry the section's chords after the colon (``Intro: Am G C``).
Keywords cover English, Hebrew and Spanish sheets.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from chord_sheet.grammar import is_chord
from chord_sheet.sheet_parser.models import Line, Section, SectionType

logger = logging.getLogger(__name__)

BRACKET_HEADER_RE = re.compile(r"^\s*\[([^\[\]]+)\]\s*$")
COLON_HEADER_RE = re.compile(r"^\s*([^:]+?)\s*:\s*(.*?)\s*$")

# Keyword (lowercase) to section type
SECTION_KEYWORDS: dict[str, SectionType] = {
    "verse": "verse",
    "chorus": "chorus",
    "refrain": "chorus",
    "pre-chorus": "chorus",
    "prechorus": "chorus",
    "bridge": "bridge",
    "interlude": "bridge",
    "solo": "bridge",
    "instrumental": "bridge",
    "intro": "intro",
    "outro": "outro",
    "ending": "outro",
    "coda": "outro",
    # Hebrew
    "בית": "verse",
    "פזמון": "chorus",
    "גשר": "bridge",
    "מבוא": "intro",
    "פתיחה": "intro",
    "סיום": "outro",
    "סוף": "outro",
    # Spanish
    "estrofa": "verse",
    "coro": "chorus",
    "estribillo": "chorus",
    "puente": "bridge",
    "introducción": "intro",
    "introduccion": "intro",
    "final": "outro",
}

DEFAULT_LABEL = "Verse"
DEFAULT_TYPE: SectionType = "verse"


@dataclass(frozen=True)
class SectionHeader:
    """A detected section header.

    Parameters
    ----------
    label : str
        The label as written, without brackets or colon.
    type : SectionType
        Section type derived from the label's keyword.
    chords : tuple[str, ...]
        Chords written on the header line after the colon, if any.
    """

    label: str
    type: SectionType
    chords: tuple[str, ...] = ()


def _keyword(word: str) -> str:
    """Normalize a label word for keyword lookup ("Verse1" -> "verse")."""
    return word.lower().strip(".,;#()").rstrip("0123456789")


def section_type(label: str) -> SectionType | None:
    """Find the section type named by a label.

    The first word is checked first, then every other word.

    Examples
    --------
    >>> section_type("Chorus x2")
    'chorus'
    >>> section_type("Guitar Solo")
    'bridge'
    >>> section_type("Hello") is None
    True
    """
    words = [_keyword(w) for w in label.split()]
    for word in words:
        if word in SECTION_KEYWORDS:
            return SECTION_KEYWORDS[word]
    return None


def match_header(line: str) -> SectionHeader | None:
    """Detect a section header line.

    Parameters
    ----------
    line : str
        The line to check.

    Returns
    -------
    SectionHeader | None
        The header, or None if the line is not a header.

    Examples
    --------
    >>> match_header("[Verse 1]")
    SectionHeader(label='Verse 1', type='verse', chords=())
    >>> match_header("Chorus:")
    SectionHeader(label='Chorus', type='chorus', chords=())
    >>> match_header("[Anything]")
    SectionHeader(label='Anything', type='verse', chords=())
    >>> match_header("Intro: Am G C").chords
    ('Am', 'G', 'C')
    >>> match_header("Note: play softly") is None
    True
    >>> match_header("Chorus: sing along") is None
    True
    """
    match = BRACKET_HEADER_RE.match(line)
    if match:
        label = match.group(1).strip()
        if label:
            return SectionHeader(label=label, type=section_type(label) or DEFAULT_TYPE)
        return None

    match = COLON_HEADER_RE.match(line)
    if match:
        label = match.group(1)
        if not label.strip():
            return None
        first = _keyword(label.split()[0])
        if first not in SECTION_KEYWORDS:
            return None
        # Anything after the colon must be chords
        chords = tuple(match.group(2).split())
        if not all(is_chord(c, lenient=True) for c in chords):
            return None
        return SectionHeader(label=label, type=SECTION_KEYWORDS[first], chords=chords)

    # Bare keyword with an optional number ("CHORUS", "Verse 2")
    words = line.split()
    if 1 <= len(words) <= 2 and _keyword(words[0]) in SECTION_KEYWORDS:
        if len(words) == 1 or words[1].isdigit():
            label = " ".join(words)
            return SectionHeader(label=label, type=SECTION_KEYWORDS[_keyword(words[0])])

    return None


class SectionAssembler:
    """Group lines into sections as they are read.

    A header closes the current section (when it has lines) and opens a new
    one. Lines arriving before any header open an implicit "Verse" section.
    Sections left without lines are dropped. Ids are ``section-<n>``,
    numbered over the sections actually emitted.

    Examples
    --------
    >>> from chord_sheet.sheet_parser.models import Line, Word
    >>> assembler = SectionAssembler()
    >>> assembler.add_line(Line(words=(Word("hello"),)))
    >>> assembler.add_header(SectionHeader(label="Chorus", type="chorus"))
    >>> assembler.add_line(Line(words=(Word("again"),)))
    >>> [(s.id, s.label) for s in assembler.finish()]
    [('section-1', 'Verse'), ('section-2', 'Chorus')]
    """

    def __init__(
        self,
        default_label: str = DEFAULT_LABEL,
        default_type: SectionType = DEFAULT_TYPE,
    ) -> None:
        self.default_label = default_label
        self.default_type = default_type
        self._sections: list[Section] = []
        self._header: SectionHeader | None = None
        self._id = ""
        self._lines: list[Line] = []

    def _open(self, header: SectionHeader) -> None:
        self._header = header
        self._id = f"section-{len(self._sections) + 1}"
        self._lines = []

    def _close(self) -> None:
        if self._header is None:
            return
        if self._lines:
            self._sections.append(
                Section(
                    id=self._id,
                    type=self._header.type,
                    label=self._header.label,
                    lines=tuple(self._lines),
                )
            )
        else:
            logger.debug("Dropping empty section %r", self._header.label)
        self._header = None
        self._lines = []

    def add_header(self, header: SectionHeader) -> None:
        """Close the current section and open a new one."""
        self._close()
        logger.debug("Opening section %r (%s)", header.label, header.type)
        self._open(header)

    def add_line(self, line: Line) -> None:
        """Append a line, opening the default section if none is open."""
        if self._header is None:
            self._open(SectionHeader(label=self.default_label, type=self.default_type))
        self._lines.append(line)

    def finish(self) -> tuple[Section, ...]:
        """Close the last section and return all sections."""
        self._close()
        return tuple(self._sections)
