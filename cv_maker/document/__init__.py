"""
Document subsystem exports.
"""

from .builder import build_tree, parse_document
from .classifier import ClassifiedLine, LineClassifier, LineKind, classify_lines
from .config import EditorConfig, get_config, get_draft_storage, get_history
from .editor import (
    AddBullet,
    DocumentEditor,
    EditorState,
    LoadDocument,
    MoveBullet,
    RemoveBullet,
    UpdateNode,
    reduce,
)
from .history import ApplicationHistory, extract_company_name
from .models import (
    BulletItem,
    BulletList,
    Contact,
    Document,
    JobTitle,
    MatchAnalysis,
    Mixed,
    Name,
    Node,
    NodeKind,
    Paragraph,
    SavedApplication,
    Section,
    TextRun,
    to_dict,
)
from .mutator import add_bullet, move_bullet, remove_bullet, update
from .preview import render_preview, render_preview_text
from .repository import ApplicationRepository, InMemoryApplicationRepository, SqlAlchemyApplicationRepository
from .serializer import serialize
from .spans import parse_spans
from .storage import LocalDraftStorage, StoragePaths
from .themes import ThemeConfig, get_theme, list_themes

__all__ = [
    "AddBullet",
    "ApplicationHistory",
    "ApplicationRepository",
    "BulletItem",
    "BulletList",
    "ClassifiedLine",
    "Contact",
    "Document",
    "DocumentEditor",
    "EditorConfig",
    "EditorState",
    "InMemoryApplicationRepository",
    "JobTitle",
    "LineClassifier",
    "LineKind",
    "LoadDocument",
    "LocalDraftStorage",
    "MatchAnalysis",
    "Mixed",
    "MoveBullet",
    "Name",
    "Node",
    "NodeKind",
    "Paragraph",
    "RemoveBullet",
    "SavedApplication",
    "Section",
    "SqlAlchemyApplicationRepository",
    "StoragePaths",
    "TextRun",
    "ThemeConfig",
    "UpdateNode",
    "add_bullet",
    "build_tree",
    "classify_lines",
    "extract_company_name",
    "get_config",
    "get_draft_storage",
    "get_history",
    "get_theme",
    "list_themes",
    "move_bullet",
    "parse_document",
    "parse_spans",
    "reduce",
    "remove_bullet",
    "render_preview",
    "render_preview_text",
    "serialize",
    "to_dict",
    "update",
]
