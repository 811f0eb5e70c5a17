"""
Editor facade: a reducer over (tree, text) snapshots plus a small stateful
wrapper that a UI drives.

The reducer is the whole editing model. `DocumentEditor` only keeps a
reference to the latest state; old states stay valid for anyone still
holding them (a preview rendering the previous snapshot, for instance).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from . import mutator
from .builder import parse_document
from .models import Document, Path
from .mutator import NodeValue
from .serializer import serialize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorState:
    tree: Document = field(default_factory=Document)
    text: str = ""

    @classmethod
    def from_tree(cls, tree: Document) -> "EditorState":
        return cls(tree=tree, text=serialize(tree))


@dataclass(frozen=True)
class LoadDocument:
    raw: str


@dataclass(frozen=True)
class UpdateNode:
    path: Tuple[int, ...]
    value: NodeValue


@dataclass(frozen=True)
class AddBullet:
    section_index: int
    position: Optional[int] = None
    text: str = ""


@dataclass(frozen=True)
class RemoveBullet:
    section_index: int
    bullet_index: int


@dataclass(frozen=True)
class MoveBullet:
    section_index: int
    from_index: int
    to_index: int


EditorAction = Union[LoadDocument, UpdateNode, AddBullet, RemoveBullet, MoveBullet]


def reduce(state: EditorState, action: EditorAction) -> EditorState:
    if isinstance(action, LoadDocument):
        return EditorState.from_tree(parse_document(action.raw))

    if isinstance(action, UpdateNode):
        tree = mutator.update(state.tree, action.path, action.value)
    elif isinstance(action, AddBullet):
        tree = mutator.add_bullet(state.tree, action.section_index, action.position, action.text)
    elif isinstance(action, RemoveBullet):
        tree = mutator.remove_bullet(state.tree, action.section_index, action.bullet_index)
    elif isinstance(action, MoveBullet):
        tree = mutator.move_bullet(state.tree, action.section_index, action.from_index, action.to_index)
    else:
        logger.warning("Unknown editor action %r", action)
        return state

    if tree is state.tree:
        return state
    return EditorState.from_tree(tree)


class DocumentEditor:
    """
    Stateful surface over `reduce`. Each call swaps in a new state whose tree
    and text agree (text is always the serialization of the tree).
    """

    def __init__(self, raw: str = ""):
        self._state = EditorState()
        if raw:
            self.load(raw)

    @property
    def state(self) -> EditorState:
        return self._state

    def dispatch(self, action: EditorAction) -> EditorState:
        self._state = reduce(self._state, action)
        return self._state

    def load(self, raw: str) -> None:
        self.dispatch(LoadDocument(raw or ""))
        logger.info("Loaded document with %d sections", len(self._state.tree.sections()))

    def get_tree(self) -> Document:
        return self._state.tree

    def get_text(self) -> str:
        return self._state.text

    def update_node(self, path: Path, value: NodeValue) -> None:
        self.dispatch(UpdateNode(tuple(path), value))

    def add_bullet(self, section_index: int, position: Optional[int] = None, text: str = "") -> None:
        self.dispatch(AddBullet(section_index, position, text))

    def remove_bullet(self, section_index: int, bullet_index: int) -> None:
        self.dispatch(RemoveBullet(section_index, bullet_index))

    def move_bullet(self, section_index: int, from_index: int, to_index: int) -> None:
        self.dispatch(MoveBullet(section_index, from_index, to_index))
