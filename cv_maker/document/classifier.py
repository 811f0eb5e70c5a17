"""
Line classification for the CV dialect.

Every input line is labelled with the kind of node it produces. The rules
are tried in a fixed priority order, so a line that fits several of them
always resolves the same way:

1. blank line (closes an open bullet list)
2. leading `#` run: name on the first non-blank line, section otherwise
3. line wrapped in a single `**...**` pair: same as 2 (an empty body such as
   `****` is not a header and falls through to the later rules)
4. contact line: before the first section, one or two `|` with at least one
   non-empty field, no list marker
5. bullet: `-`, `*` or `•` followed by whitespace
6. job title: one or two `|` and a field that looks like a date
7. mixed: contains a `**bold**` pair
8. paragraph

The date test in rule 6 is a heuristic (4-digit number, month-name
fragment, "present"/"current"); it misfires on words such as "Marketing".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .models import CONTACT_FIELD_SEPARATOR, TextRun
from .spans import BOLD_MARKER, has_emphasis, parse_spans

logger = logging.getLogger(__name__)

LIST_MARKERS = ("-", "*", "•")

_HEADER = re.compile(r"^#+\s*")
_BULLET = re.compile(r"^[-*•](?:\s+(.*))?$")
_YEAR = re.compile(r"\d{4}")
_PRESENT = re.compile(r"present|current", re.I)
_MONTH = re.compile(r"jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec", re.I)


class LineKind(str, Enum):
    BLANK = "blank"
    NAME = "name"
    SECTION = "section"
    CONTACT = "contact"
    BULLET = "bullet"
    JOB_TITLE = "job_title"
    MIXED = "mixed"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    line_number: int
    # Header title, bullet body, or the stripped line.
    text: str = ""
    runs: Optional[Tuple[TextRun, ...]] = None


def contact_entries(text: str, separator: str = CONTACT_FIELD_SEPARATOR) -> Tuple[str, ...]:
    """Non-empty, stripped fields of a contact line."""
    return tuple(part.strip() for part in text.split(separator) if part.strip())


def looks_like_date(field_text: str) -> bool:
    return bool(_YEAR.search(field_text) or _PRESENT.search(field_text) or _MONTH.search(field_text))


def bold_wrapped_text(line: str) -> Optional[str]:
    """Return the inner text of a `**...**` line with no nested pair, else None."""
    if len(line) <= 2 * len(BOLD_MARKER):
        return None
    if not (line.startswith(BOLD_MARKER) and line.endswith(BOLD_MARKER)):
        return None
    inner = line[len(BOLD_MARKER):-len(BOLD_MARKER)]
    if BOLD_MARKER in inner or not inner.strip():
        return None
    return inner.strip()


class LineClassifier:
    """
    Stateful, single-pass classifier. Tracks whether the next non-blank line
    is the first one (name candidate) and whether the first section has been
    seen yet (end of the contact zone). Use a fresh instance per document,
    or one started in a given state to read a single line in place.
    """

    def __init__(self, first_line: bool = True, in_contact_zone: bool = True):
        self._first_non_blank = first_line
        self._in_contact_zone = in_contact_zone
        self._line_number = 0

    def classify(self, line: str) -> ClassifiedLine:
        self._line_number += 1
        number = self._line_number
        stripped = line.strip()

        if not stripped:
            return ClassifiedLine(LineKind.BLANK, number)

        if stripped.startswith("#"):
            return self._header(_HEADER.sub("", stripped).strip(), number)

        wrapped = bold_wrapped_text(stripped)
        if wrapped is not None:
            return self._header(wrapped, number)

        self._first_non_blank = False
        separators = stripped.count(CONTACT_FIELD_SEPARATOR)

        if (
            self._in_contact_zone
            and 1 <= separators <= 2
            and not stripped.startswith(LIST_MARKERS)
            and contact_entries(stripped)
        ):
            return ClassifiedLine(LineKind.CONTACT, number, stripped)

        bullet = _BULLET.match(stripped)
        if bullet:
            body = bullet.group(1) or ""
            if has_emphasis(body):
                return ClassifiedLine(LineKind.BULLET, number, body, parse_spans(body))
            return ClassifiedLine(LineKind.BULLET, number, body)

        if 1 <= separators <= 2:
            parts = [part.strip() for part in stripped.split(CONTACT_FIELD_SEPARATOR)]
            if any(looks_like_date(part) for part in parts):
                if has_emphasis(stripped):
                    return ClassifiedLine(LineKind.JOB_TITLE, number, stripped, parse_spans(stripped))
                return ClassifiedLine(LineKind.JOB_TITLE, number, stripped)

        if has_emphasis(stripped):
            return ClassifiedLine(LineKind.MIXED, number, stripped, parse_spans(stripped))

        return ClassifiedLine(LineKind.PARAGRAPH, number, stripped)

    def _header(self, text: str, number: int) -> ClassifiedLine:
        if self._first_non_blank:
            self._first_non_blank = False
            return ClassifiedLine(LineKind.NAME, number, text)
        self._in_contact_zone = False
        return ClassifiedLine(LineKind.SECTION, number, text)


def classify_lines(lines: Iterable[str]) -> List[ClassifiedLine]:
    classifier = LineClassifier()
    classified = [classifier.classify(line) for line in lines]
    logger.debug("Classified %d lines", len(classified))
    return classified
