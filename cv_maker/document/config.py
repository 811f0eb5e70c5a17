from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .history import MAX_APPLICATIONS, ApplicationHistory
from .repository import SqlAlchemyApplicationRepository
from .storage import LocalDraftStorage, StoragePaths
from .themes import DEFAULT_THEME


@dataclass
class EditorConfig:
    database_url: str = "sqlite+pysqlite:///./data/cv_maker.db"
    storage_root: Path = Path("./data")
    max_applications: int = MAX_APPLICATIONS
    theme: str = DEFAULT_THEME
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EditorConfig":
        max_raw = os.getenv("CV_MAKER_MAX_APPLICATIONS", str(MAX_APPLICATIONS))
        try:
            max_applications = int(max_raw)
        except ValueError as exc:
            raise ValueError(f"CV_MAKER_MAX_APPLICATIONS must be an integer, got {max_raw!r}") from exc
        if max_applications < 1:
            raise ValueError(f"CV_MAKER_MAX_APPLICATIONS must be positive, got {max_applications}")
        return cls(
            database_url=os.getenv("CV_MAKER_DATABASE_URL", cls.database_url),
            storage_root=Path(os.getenv("CV_MAKER_STORAGE_ROOT", "./data")),
            max_applications=max_applications,
            theme=os.getenv("CV_MAKER_THEME", DEFAULT_THEME),
            log_level=os.getenv("CV_MAKER_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_config() -> EditorConfig:
    return EditorConfig.from_env()


def _ensure_sqlite_dir(database_url: str) -> None:
    if not database_url.startswith("sqlite") or "///" not in database_url:
        return
    db_path = database_url.split("///", 1)[1]
    if db_path and db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_history() -> ApplicationHistory:
    config = get_config()
    _ensure_sqlite_dir(config.database_url)
    repo = SqlAlchemyApplicationRepository(config.database_url)
    return ApplicationHistory(repo, max_applications=config.max_applications)


@lru_cache(maxsize=1)
def get_draft_storage() -> LocalDraftStorage:
    return LocalDraftStorage(StoragePaths(get_config().storage_root))
