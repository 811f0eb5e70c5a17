"""
Path-addressed edits over an immutable Document.

Every function takes a tree and returns a tree. The input is never touched:
the nodes along the edited path are rebuilt with `dataclasses.replace` and
every other subtree is shared with the input as-is. Indices that do not
resolve (stale paths from a UI racing ahead of the tree, negative values,
positions past the end) make the call a no-op that returns the input tree.

New content is flattened to one line and read back through the classifier
at the place it will be written, so the stored node is exactly what the
serialized text parses to. A value that would read back as another kind of
node (a paragraph typed as `# Title`, a contact with no fields) leaves the
tree unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Callable, Mapping, Optional, Sequence, Tuple, Union

from .builder import job_parts, line_node, make_bullet_item
from .classifier import LineClassifier, contact_entries
from .models import (
    CONTACT_DISPLAY_SEPARATOR,
    CONTACT_FIELD_SEPARATOR,
    BulletItem,
    BulletList,
    Contact,
    Document,
    Node,
    Path,
    Section,
    TextRun,
)
from .serializer import node_line
from .spans import clean_runs, parse_spans, runs_to_text

logger = logging.getLogger(__name__)

NodeValue = Union[str, Sequence[TextRun], Mapping[str, str]]

_LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


def single_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text or "")


def _with_children(node, children: Tuple[Node, ...]):
    if isinstance(node, Document):
        return replace(node, nodes=children)
    if isinstance(node, Section):
        return replace(node, body=children)
    if isinstance(node, BulletList):
        return replace(node, items=children)
    return node


def _replace_at(node, path: Path, fn: Callable):
    if not path:
        return fn(node)
    children = node.children
    index = path[0]
    if index < 0 or index >= len(children):
        return node
    child = _replace_at(children[index], path[1:], fn)
    if child is children[index]:
        return node
    return _with_children(node, children[:index] + (child,) + children[index + 1:])


def _is_runs(value: NodeValue) -> bool:
    return not isinstance(value, (str, Mapping))


def flatten_value(value: NodeValue) -> NodeValue:
    """Replace line breaks in every piece of text with a single space."""
    if isinstance(value, str):
        return single_line(value)
    if isinstance(value, Mapping):
        return {key: single_line(text) for key, text in value.items()}
    return tuple(replace(run, text=single_line(run.text)) for run in value)


def _updated_job(node: BulletItem, value: NodeValue) -> BulletItem:
    if isinstance(value, Mapping):
        return replace(
            node,
            title=value.get("title", node.title),
            subtitle=value.get("subtitle", node.subtitle),
        )
    runs = clean_runs(value) if _is_runs(value) else parse_spans(value)
    text = runs_to_text(runs)
    parts = job_parts(runs, text)
    if parts:
        return replace(node, title=parts[0], subtitle=parts[1])
    return replace(node, title=text.strip())


def _updated_contact(node: Contact, text: str) -> Contact:
    # Typed text may use either the written or the display separator.
    separator = CONTACT_FIELD_SEPARATOR
    if CONTACT_FIELD_SEPARATOR not in text:
        separator = CONTACT_DISPLAY_SEPARATOR.strip()
    return replace(node, text=None, runs=None, entries=contact_entries(text, separator))


def updated_node(node: Node, value: NodeValue) -> Node:
    """Return `node` with its content replaced by `value`; the kind never changes."""
    if isinstance(node, BulletItem) and node.is_job:
        return _updated_job(node, value)
    if isinstance(value, Mapping):
        value = value.get("text", "")

    if node.plain_only:
        text = runs_to_text(value) if _is_runs(value) else value
        if isinstance(node, Contact):
            return _updated_contact(node, text)
        return replace(node, text=text, runs=None)

    if _is_runs(value):
        return replace(node, text=None, runs=clean_runs(value))
    if node.runs is not None:
        # Span-based nodes collapse to a single unstyled run.
        return replace(node, text=None, runs=clean_runs([TextRun(value)]))
    return replace(node, text=value, runs=None)


def _line_context(tree: Document, path: Path) -> Tuple[bool, bool]:
    """(first line of the document, before the first section) for the node at `path`."""
    root_index = path[0]
    if len(path) > 1 and isinstance(tree.nodes[root_index], Section):
        return False, False
    in_contact_zone = not any(isinstance(node, Section) for node in tree.nodes[:root_index])
    first_line = root_index == 0 and all(index == 0 for index in path[1:])
    return first_line, in_contact_zone


def _reread(tree: Document, path: Path, node: Node) -> Optional[Node]:
    first_line, in_contact_zone = _line_context(tree, path)
    classifier = LineClassifier(first_line=first_line, in_contact_zone=in_contact_zone)
    reread = line_node(classifier.classify(node_line(node)))
    if reread is None or reread.kind != node.kind:
        return None
    if isinstance(node, BulletItem) and node.is_job and not reread.is_job:
        return None
    if isinstance(node, Section):
        return replace(node, text=reread.text)
    return reread


def update(tree: Document, path: Path, value: NodeValue) -> Document:
    if not path:
        return tree
    target = tree.get(path)
    if target is None or isinstance(target, (Document, BulletList)):
        logger.debug("Ignoring update at unresolved path %s", list(path))
        return tree
    node = _reread(tree, path, updated_node(target, flatten_value(value)))
    if node is None:
        logger.debug("Ignoring update at %s: value does not read back as %s", list(path), target.kind.value)
        return tree
    if node == target:
        return tree
    return _replace_at(tree, path, lambda _: node)


def _section_root_index(tree: Document, section_index: int) -> Optional[int]:
    sections = tree.sections()
    if section_index < 0 or section_index >= len(sections):
        return None
    return sections[section_index][0]


def _first_list_index(section: Section) -> Optional[int]:
    for idx, child in enumerate(section.body):
        if isinstance(child, BulletList):
            return idx
    return None


def new_bullet(text: str = "") -> BulletItem:
    """A bullet as it reads back from `- text`."""
    return make_bullet_item(single_line(text).strip())


def add_bullet(
    tree: Document,
    section_index: int,
    position: Optional[int] = None,
    text: str = "",
) -> Document:
    root_index = _section_root_index(tree, section_index)
    if root_index is None:
        logger.debug("Ignoring add_bullet for missing section %s", section_index)
        return tree
    section = tree.nodes[root_index]
    item = new_bullet(text or "")
    list_index = _first_list_index(section)

    if list_index is None:
        if position not in (None, 0):
            return tree
        body = section.body + (BulletList(items=(item,)),)
        return _replace_at(tree, [root_index], lambda node: replace(node, body=body))

    items = section.body[list_index].items
    pos = len(items) if position is None else position
    if pos < 0 or pos > len(items):
        logger.debug("Ignoring add_bullet at position %s (list has %d items)", position, len(items))
        return tree
    new_items = items[:pos] + (item,) + items[pos:]
    return _replace_at(tree, [root_index, list_index], lambda node: replace(node, items=new_items))


def remove_bullet(tree: Document, section_index: int, bullet_index: int) -> Document:
    root_index = _section_root_index(tree, section_index)
    if root_index is None:
        return tree
    section = tree.nodes[root_index]
    list_index = _first_list_index(section)
    if list_index is None:
        return tree
    items = section.body[list_index].items
    if bullet_index < 0 or bullet_index >= len(items):
        logger.debug("Ignoring remove_bullet at %s (list has %d items)", bullet_index, len(items))
        return tree

    remaining = items[:bullet_index] + items[bullet_index + 1:]
    if remaining:
        return _replace_at(tree, [root_index, list_index], lambda node: replace(node, items=remaining))
    # An emptied list goes away; the section stays.
    body = section.body[:list_index] + section.body[list_index + 1:]
    return _replace_at(tree, [root_index], lambda node: replace(node, body=body))


def move_bullet(tree: Document, section_index: int, from_index: int, to_index: int) -> Document:
    root_index = _section_root_index(tree, section_index)
    if root_index is None:
        return tree
    section = tree.nodes[root_index]
    list_index = _first_list_index(section)
    if list_index is None:
        return tree
    items = list(section.body[list_index].items)
    if from_index < 0 or from_index >= len(items):
        logger.debug("Ignoring move_bullet from %s (list has %d items)", from_index, len(items))
        return tree

    moved = items.pop(from_index)
    target = max(0, min(to_index, len(items)))
    if target == from_index:
        return tree
    items.insert(target, moved)
    return _replace_at(tree, [root_index, list_index], lambda node: replace(node, items=tuple(items)))
