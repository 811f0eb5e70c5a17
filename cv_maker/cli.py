"""
Command line entry point for the CV document engine.

Usage:
    cv-maker format resume.md [--in-place] [--save-draft KEY]
    cv-maker tree resume.md
    cv-maker preview resume.md --theme classic --output preview.html
    cv-maker history [--open APP_ID]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cv_maker.document import (
    get_config,
    get_draft_storage,
    get_history,
    list_themes,
    parse_document,
    render_preview,
    serialize,
    to_dict,
)

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")
    return path.read_text(encoding="utf-8")


def show_history(app_id: Optional[str] = None) -> int:
    history = get_history()
    if app_id is None:
        for application in history.applications:
            print(f"{application.id}\t{application.created_at:%Y-%m-%d %H:%M}\t{application.name}")
        return 0

    editor = history.open_in_editor(app_id)
    if editor is None:
        print(f"Application not found: {app_id}", file=sys.stderr)
        return 1
    sys.stdout.write(editor.get_text())
    return 0


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(prog="cv-maker", description="Parse, format and preview CV documents")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    fmt = sub.add_parser("format", help="Print the canonical form of a document")
    fmt.add_argument("source", help="Path to the document, or - for stdin")
    fmt.add_argument("--in-place", action="store_true", help="Rewrite the source file")
    fmt.add_argument("--save-draft", metavar="KEY", default=None, help="Also store the result as a draft")

    tree = sub.add_parser("tree", help="Print the parsed tree as JSON")
    tree.add_argument("source", help="Path to the document, or - for stdin")

    preview = sub.add_parser("preview", help="Render an HTML preview")
    preview.add_argument("source", help="Path to the document, or - for stdin")
    preview.add_argument(
        "--theme",
        default=config.theme,
        choices=[theme.id for theme in list_themes()],
        help="Visual theme",
    )
    preview.add_argument("--output", type=Path, default=None, help="Write HTML here instead of stdout")

    history = sub.add_parser("history", help="List saved applications")
    history.add_argument("--open", metavar="APP_ID", default=None, help="Print the document of one application")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "history":
        return show_history(args.open)

    try:
        raw = read_source(args.source)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    tree = parse_document(raw)

    if args.command == "format":
        text = serialize(tree)
        if args.in_place and args.source != "-":
            Path(args.source).write_text(text, encoding="utf-8")
            logger.info("Rewrote %s", args.source)
        else:
            sys.stdout.write(text)
        if args.save_draft:
            path = get_draft_storage().save_draft(args.save_draft, text)
            logger.info("Saved draft to %s", path)
    elif args.command == "tree":
        print(json.dumps(to_dict(tree), ensure_ascii=False, indent=2))
    elif args.command == "preview":
        html = render_preview(tree, theme=args.theme)
        if args.output:
            args.output.write_text(html, encoding="utf-8")
            logger.info("Preview written to %s", args.output)
        else:
            sys.stdout.write(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
