from __future__ import annotations

import logging
import re
import uuid
from dataclasses import replace
from datetime import timedelta
from typing import List, Optional

from .editor import DocumentEditor
from .models import MatchAnalysis, SavedApplication, utcnow
from .repository import ApplicationRepository

logger = logging.getLogger(__name__)

MAX_APPLICATIONS = 20
MAX_NAME_LENGTH = 50
MAX_COMPANY_LENGTH = 30

_COMPANY_PATTERNS = [
    re.compile(r"(?:at|for|with|join)\s+([A-Z][A-Za-z0-9\s&]+?)(?:\s+(?:is|are|we|as|to|,|\.|$))", re.I),
    re.compile(r"^([A-Z][A-Za-z0-9\s&]+?)(?:\s+(?:is|are|seeking|looking|hiring))", re.I),
    re.compile(r"company:\s*([A-Za-z0-9\s&]+)", re.I),
]


def extract_company_name(job_description: str) -> str:
    for pattern in _COMPANY_PATTERNS:
        match = pattern.search(job_description or "")
        if match and match.group(1):
            return match.group(1).strip()[:MAX_COMPANY_LENGTH]
    words = " ".join((job_description or "").split()[:3])
    return words[:MAX_COMPANY_LENGTH] or "Untitled"


class ApplicationHistory:
    """
    Saved-application history on top of a repository. Keeps at most
    `max_applications` entries (oldest dropped first) and tracks which
    application is active for the current session.
    """

    def __init__(self, repository: ApplicationRepository, max_applications: int = MAX_APPLICATIONS):
        self.repo = repository
        self.max_applications = max_applications
        self.active_id: Optional[str] = None

    @property
    def applications(self) -> List[SavedApplication]:
        return self.repo.list_applications()

    @property
    def active_application(self) -> Optional[SavedApplication]:
        if self.active_id is None:
            return None
        return self.repo.get_application(self.active_id)

    def save(
        self,
        job_description: str,
        resume: str,
        tone: str,
        generated_content: Optional[str] = None,
        match_analysis: Optional[MatchAnalysis] = None,
        existing_id: Optional[str] = None,
    ) -> str:
        if existing_id:
            current = self.repo.get_application(existing_id)
            if not current:
                logger.warning("Application %s not found, nothing updated", existing_id)
                return existing_id
            self.repo.save_application(
                replace(
                    current,
                    job_description=job_description,
                    resume=resume,
                    tone=tone,
                    generated_content=generated_content,
                    match_analysis=match_analysis,
                    updated_at=utcnow(),
                )
            )
            return existing_id

        now = self._next_timestamp()
        application = SavedApplication(
            id=f"app_{uuid.uuid4().hex[:12]}",
            name=extract_company_name(job_description),
            job_description=job_description,
            resume=resume,
            tone=tone,
            generated_content=generated_content,
            match_analysis=match_analysis,
            created_at=now,
            updated_at=now,
        )
        self.repo.save_application(application)
        self._prune()
        self.active_id = application.id
        logger.info("Saved application %s (%s)", application.id, application.name)
        return application.id

    def load(self, app_id: str) -> Optional[SavedApplication]:
        application = self.repo.get_application(app_id)
        if application:
            self.active_id = app_id
        return application

    def delete(self, app_id: str) -> None:
        self.repo.delete_application(app_id)
        if self.active_id == app_id:
            self.active_id = None

    def rename(self, app_id: str, new_name: str) -> None:
        application = self.repo.get_application(app_id)
        if not application:
            return
        self.repo.save_application(replace(application, name=new_name[:MAX_NAME_LENGTH], updated_at=utcnow()))

    def clear_active(self) -> None:
        self.active_id = None

    def clear_all(self) -> None:
        self.repo.clear()
        self.active_id = None

    def open_in_editor(self, app_id: str) -> Optional[DocumentEditor]:
        """Editor loaded with the generated document, or the resume if none was generated."""
        application = self.repo.get_application(app_id)
        if not application:
            return None
        return DocumentEditor(application.generated_content or application.resume)

    def _next_timestamp(self):
        # Creation times stay strictly increasing so newest-first order is total.
        now = utcnow()
        existing = self.repo.list_applications()
        if existing and existing[0].created_at >= now:
            now = existing[0].created_at + timedelta(microseconds=1)
        return now

    def _prune(self) -> None:
        for stale in self.repo.list_applications()[self.max_applications:]:
            self.repo.delete_application(stale.id)
            logger.debug("Pruned application %s", stale.id)
