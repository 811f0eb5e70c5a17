from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Union


class NodeKind(str, Enum):
    NAME = "name"
    CONTACT = "contact"
    SECTION = "section"
    BULLET_LIST = "bullet_list"
    BULLET_ITEM = "bullet_item"
    JOB_TITLE = "job_title"
    PARAGRAPH = "paragraph"
    MIXED = "mixed"


Path = Sequence[int]

CONTACT_FIELD_SEPARATOR = "|"
CONTACT_DISPLAY_SEPARATOR = " • "


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class Node:
    """
    Base of every tree node. A node holds its text either as a plain string
    (`text`) or as styled runs (`runs`), never both. Nodes are immutable;
    edits produce new nodes through `dataclasses.replace`.
    """

    kind: ClassVar[NodeKind]
    # Kinds whose text can only be a plain string.
    plain_only: ClassVar[bool] = False

    text: Optional[str] = None
    runs: Optional[Tuple[TextRun, ...]] = None

    @property
    def children(self) -> Tuple["Node", ...]:
        return ()

    @property
    def plain_text(self) -> str:
        if self.runs is not None:
            return "".join(run.text for run in self.runs)
        return self.text or ""


@dataclass(frozen=True)
class Name(Node):
    kind: ClassVar[NodeKind] = NodeKind.NAME
    plain_only: ClassVar[bool] = True


@dataclass(frozen=True)
class Contact(Node):
    """
    `entries` are the fields as written between `|` separators; `text` is
    always their display form. A node built from `text` alone splits it on
    the display separator.
    """

    kind: ClassVar[NodeKind] = NodeKind.CONTACT
    plain_only: ClassVar[bool] = True

    entries: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.entries:
            object.__setattr__(self, "entries", tuple(self.entries))
            object.__setattr__(self, "text", CONTACT_DISPLAY_SEPARATOR.join(self.entries))
        elif self.text:
            object.__setattr__(self, "entries", tuple(self.text.split(CONTACT_DISPLAY_SEPARATOR)))


@dataclass(frozen=True)
class Paragraph(Node):
    kind: ClassVar[NodeKind] = NodeKind.PARAGRAPH
    plain_only: ClassVar[bool] = True


@dataclass(frozen=True)
class JobTitle(Node):
    kind: ClassVar[NodeKind] = NodeKind.JOB_TITLE


@dataclass(frozen=True)
class Mixed(Node):
    kind: ClassVar[NodeKind] = NodeKind.MIXED


@dataclass(frozen=True)
class BulletItem(Node):
    """
    A list entry. The job variant carries `title` and `subtitle` instead of
    `text`/`runs`; "nested" bullets under a job are the plain items that
    follow it in the same list (see `BulletList.job_groups`).
    """

    kind: ClassVar[NodeKind] = NodeKind.BULLET_ITEM

    title: Optional[str] = None
    subtitle: Optional[str] = None

    @property
    def is_job(self) -> bool:
        return self.title is not None

    @property
    def plain_text(self) -> str:
        if self.is_job:
            return f"{self.title} | {self.subtitle}" if self.subtitle else self.title or ""
        return super().plain_text


@dataclass(frozen=True)
class BulletList(Node):
    kind: ClassVar[NodeKind] = NodeKind.BULLET_LIST

    items: Tuple[BulletItem, ...] = ()

    @property
    def children(self) -> Tuple[BulletItem, ...]:
        return self.items

    def job_groups(self) -> List[Tuple[Optional[BulletItem], List[BulletItem]]]:
        """
        Attach each plain item to the closest job item before it. Plain items
        that precede any job are grouped under None.
        """
        groups: List[Tuple[Optional[BulletItem], List[BulletItem]]] = []
        for item in self.items:
            if item.is_job:
                groups.append((item, []))
            elif groups:
                groups[-1][1].append(item)
            else:
                groups.append((None, [item]))
        return groups


@dataclass(frozen=True)
class Section(Node):
    kind: ClassVar[NodeKind] = NodeKind.SECTION
    plain_only: ClassVar[bool] = True

    body: Tuple[Node, ...] = ()

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.body


@dataclass(frozen=True)
class Document:
    """
    Root of a parsed document. Nodes before the first section sit directly
    under the root; every section owns the nodes up to the next section.
    """

    nodes: Tuple[Node, ...] = field(default_factory=tuple)

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.nodes

    def get(self, path: Path) -> Optional[Union["Document", Node]]:
        current: Union[Document, Node] = self
        for index in path:
            children = current.children
            if index < 0 or index >= len(children):
                return None
            current = children[index]
        return current

    def sections(self) -> List[Tuple[int, Section]]:
        return [(idx, node) for idx, node in enumerate(self.nodes) if isinstance(node, Section)]

    @property
    def name(self) -> Optional[Name]:
        if self.nodes and isinstance(self.nodes[0], Name):
            return self.nodes[0]
        return None


def to_dict(node: Union[Document, Node, TextRun]) -> Dict[str, Any]:
    """
    JSON-ready form of a tree. Unset text/runs and job fields are omitted so
    the output mirrors the node's actual shape.
    """
    if isinstance(node, TextRun):
        data: Dict[str, Any] = {"text": node.text}
        if node.bold:
            data["bold"] = True
        if node.italic:
            data["italic"] = True
        return data
    if isinstance(node, Document):
        return {"type": "document", "children": [to_dict(child) for child in node.nodes]}

    data = {"type": node.kind.value}
    for f in fields(node):
        value = getattr(node, f.name)
        if value is None:
            continue
        if f.name == "runs":
            data["spans"] = [to_dict(run) for run in value]
        elif f.name in ("items", "body"):
            data["children"] = [to_dict(child) for child in value]
        elif f.name == "entries":
            if value:
                data["entries"] = list(value)
        else:
            data[f.name] = value
    return data


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class MatchAnalysis:
    score: float
    reasoning: str
    missing_keywords: List[str] = field(default_factory=list)


@dataclass
class SavedApplication:
    id: str
    name: str
    job_description: str
    resume: str
    tone: str
    generated_content: Optional[str] = None
    match_analysis: Optional[MatchAnalysis] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
