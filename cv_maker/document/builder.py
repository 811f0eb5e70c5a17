from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .classifier import ClassifiedLine, LineKind, classify_lines, contact_entries
from .models import (
    CONTACT_FIELD_SEPARATOR,
    BulletItem,
    BulletList,
    Contact,
    Document,
    JobTitle,
    Mixed,
    Name,
    Node,
    Paragraph,
    Section,
    TextRun,
)
from .spans import has_emphasis, parse_spans, runs_to_text

logger = logging.getLogger(__name__)


def job_parts(runs: Sequence[TextRun], line: str) -> Optional[Tuple[str, str]]:
    """
    Split a bullet into (title, subtitle) when it is a job entry: the first
    run is bold and the line carries a field separator.
    """
    if not runs or not runs[0].bold or CONTACT_FIELD_SEPARATOR not in line:
        return None
    title = runs[0].text.strip()
    subtitle = runs_to_text(runs[1:]).strip()
    if subtitle.startswith(CONTACT_FIELD_SEPARATOR):
        subtitle = subtitle[len(CONTACT_FIELD_SEPARATOR):].strip()
    return title, subtitle


def make_bullet_item(text: str, runs: Optional[Sequence[TextRun]] = None) -> BulletItem:
    if runs is None and has_emphasis(text):
        runs = parse_spans(text)
    if runs is None:
        return BulletItem(text=text)
    parts = job_parts(runs, text)
    if parts:
        return BulletItem(title=parts[0], subtitle=parts[1])
    return BulletItem(runs=tuple(runs))


def line_node(line: ClassifiedLine) -> Optional[Node]:
    """The node a single classified line stands for; None for a blank line."""
    if line.kind == LineKind.BLANK:
        return None
    if line.kind == LineKind.NAME:
        return Name(text=line.text)
    if line.kind == LineKind.SECTION:
        return Section(text=line.text)
    if line.kind == LineKind.BULLET:
        return make_bullet_item(line.text, line.runs)
    if line.kind == LineKind.CONTACT:
        return Contact(entries=contact_entries(line.text))
    if line.kind == LineKind.JOB_TITLE:
        if line.runs is not None:
            return JobTitle(runs=line.runs)
        return JobTitle(text=line.text)
    if line.kind == LineKind.MIXED:
        return Mixed(runs=line.runs)
    return Paragraph(text=line.text)


class TreeBuilder:
    """
    Folds a classified line stream into a Document. Consecutive bullet lines
    are gathered into one list; headers open sections that collect every
    node up to the next header.
    """

    def __init__(self):
        self._root: List[Node] = []
        self._section_title: Optional[str] = None
        self._section_body: List[Node] = []
        self._bullets: List[BulletItem] = []

    def feed(self, line: ClassifiedLine) -> None:
        if line.kind == LineKind.BULLET:
            self._bullets.append(make_bullet_item(line.text, line.runs))
            return

        self._flush_bullets()
        if line.kind == LineKind.BLANK:
            return
        if line.kind == LineKind.NAME:
            self._emit(Name(text=line.text))
        elif line.kind == LineKind.SECTION:
            self._close_section()
            self._section_title = line.text
        else:
            self._emit(line_node(line))

    def finish(self) -> Document:
        self._flush_bullets()
        self._close_section()
        return Document(nodes=tuple(self._root))

    def _emit(self, node: Node) -> None:
        if self._section_title is None:
            self._root.append(node)
        else:
            self._section_body.append(node)

    def _flush_bullets(self) -> None:
        if self._bullets:
            self._emit(BulletList(items=tuple(self._bullets)))
            self._bullets = []

    def _close_section(self) -> None:
        if self._section_title is not None:
            self._root.append(Section(text=self._section_title, body=tuple(self._section_body)))
        self._section_title = None
        self._section_body = []


def build_tree(lines: Iterable[ClassifiedLine]) -> Document:
    builder = TreeBuilder()
    for line in lines:
        builder.feed(line)
    return builder.finish()


def parse_document(raw: str) -> Document:
    document = build_tree(classify_lines((raw or "").splitlines()))
    logger.debug("Parsed document with %d top-level nodes", len(document.nodes))
    return document
