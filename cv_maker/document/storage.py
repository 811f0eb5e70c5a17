from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def draft_slug(key: str) -> str:
    slug = _UNSAFE.sub("-", key.strip()).strip("-.")
    return slug or "draft"


@dataclass
class StoragePaths:
    root: Path

    def drafts_dir(self) -> Path:
        return self.root / "drafts"

    def draft_path(self, key: str) -> Path:
        return self.drafts_dir() / f"{draft_slug(key)}.md"


class LocalDraftStorage:
    """
    Keeps editor drafts on the local filesystem, one file per key. The
    document text is stored exactly as given.
    """

    def __init__(self, storage_paths: StoragePaths):
        self.paths = storage_paths

    def ensure_base_dirs(self) -> None:
        self.paths.drafts_dir().mkdir(parents=True, exist_ok=True)

    def save_draft(self, key: str, text: str) -> Path:
        self.ensure_base_dirs()
        target = self.paths.draft_path(key)
        target.write_text(text, encoding="utf-8")
        logger.debug("Saved draft %s (%d chars)", target.name, len(text))
        return target

    def load_draft(self, key: str) -> Optional[str]:
        path = self.paths.draft_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def draft_exists(self, key: str) -> bool:
        return self.paths.draft_path(key).exists()

    def delete_draft(self, key: str) -> None:
        path = self.paths.draft_path(key)
        if path.exists():
            path.unlink()
        else:
            logger.warning("Draft %s not found, nothing deleted", path.name)

    def list_drafts(self) -> List[str]:
        directory = self.paths.drafts_dir()
        if not directory.exists():
            return []
        return sorted(p.stem for p in directory.glob("*.md"))
