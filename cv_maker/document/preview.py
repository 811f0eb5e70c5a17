"""
HTML live preview of a document tree.

Maps node kinds to markup with the theme's font and colours. Text is
autoescaped, so anything a user typed into the document is shown literally.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .builder import parse_document
from .models import Document
from .themes import DEFAULT_THEME, get_theme

_TEMPLATE_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(loader=FileSystemLoader(_TEMPLATE_DIR), autoescape=True)


def render_preview(tree: Document, theme: str = DEFAULT_THEME) -> str:
    template = _environment().get_template("preview.html")
    return template.render(tree=tree, theme=get_theme(theme))


def render_preview_text(raw: str, theme: str = DEFAULT_THEME) -> str:
    return render_preview(parse_document(raw), theme=theme)
