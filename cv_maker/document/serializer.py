from __future__ import annotations

from typing import Iterable, List

from .models import (
    CONTACT_FIELD_SEPARATOR,
    BulletItem,
    BulletList,
    Contact,
    Document,
    Name,
    Node,
    Section,
)
from .spans import BOLD_MARKER, runs_to_markup

HEADER_PREFIX = "# "
BULLET_PREFIX = "- "


def node_markup(node: Node) -> str:
    if node.runs is not None:
        return runs_to_markup(node.runs)
    return node.text or ""


def contact_line(node: Contact) -> str:
    line = f" {CONTACT_FIELD_SEPARATOR} ".join(node.entries)
    if len(node.entries) == 1:
        # A lone field still needs a separator to read back as contact.
        line = f"{line} {CONTACT_FIELD_SEPARATOR}"
    return line


def bullet_line(item: BulletItem) -> str:
    if item.is_job:
        # The separator is always written so the item reads back as a job.
        line = f"{BOLD_MARKER}{item.title}{BOLD_MARKER} {CONTACT_FIELD_SEPARATOR}"
        if item.subtitle:
            line = f"{line} {item.subtitle}"
        return BULLET_PREFIX + line
    return BULLET_PREFIX + node_markup(item)


def node_line(node: Node) -> str:
    """The single line a leaf node (or a section header) is written as."""
    if isinstance(node, (Name, Section)):
        return HEADER_PREFIX + (node.text or "")
    if isinstance(node, Contact):
        return contact_line(node)
    if isinstance(node, BulletItem):
        return bullet_line(node)
    return node_markup(node)


class Serializer:
    """
    Writes a Document back into the dialect. Output order is tree order; a
    blank line goes before every section header (except at the very top)
    and between two lists that would otherwise merge on re-parse.
    """

    def __init__(self):
        self._lines: List[str] = []
        self._last_was_list = False

    def write(self, tree: Document) -> str:
        self._write_nodes(tree.nodes)
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def _write_nodes(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self._write_node(node)

    def _write_node(self, node: Node) -> None:
        if isinstance(node, BulletList):
            if not node.items:
                return
            if self._last_was_list:
                self._lines.append("")
            self._lines.extend(bullet_line(item) for item in node.items)
            self._last_was_list = True
            return

        self._last_was_list = False
        if isinstance(node, Section):
            if self._lines:
                self._lines.append("")
            self._lines.append(node_line(node))
            self._write_nodes(node.body)
        else:
            self._lines.append(node_line(node))


def serialize(tree: Document) -> str:
    return Serializer().write(tree)
