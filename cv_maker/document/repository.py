from __future__ import annotations

import json
from copy import deepcopy
from typing import Dict, List, Optional

from sqlalchemy import Column, DateTime, Float, String, Text, create_engine, delete, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .models import MatchAnalysis, SavedApplication

Base = declarative_base()


class ApplicationModel(Base):
    __tablename__ = "applications"
    id = Column(String, primary_key=True)
    name = Column(String)
    job_description = Column(Text)
    resume = Column(Text)
    tone = Column(String)
    generated_content = Column(Text)
    match_score = Column(Float)
    match_reasoning = Column(Text)
    missing_keywords_json = Column(String)
    created_at = Column(DateTime, index=True)
    updated_at = Column(DateTime)


class ApplicationRepository:
    """
    Persistence boundary for saved applications. The stored resume and
    generated content are dialect text kept as opaque strings.
    """

    def get_application(self, app_id: str) -> Optional[SavedApplication]:
        raise NotImplementedError

    def save_application(self, application: SavedApplication) -> None:
        raise NotImplementedError

    def list_applications(self) -> List[SavedApplication]:
        """Newest first, by creation time."""
        raise NotImplementedError

    def delete_application(self, app_id: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryApplicationRepository(ApplicationRepository):
    """
    In-memory store for local runs and tests. Keeps copies of the dataclasses
    to avoid cross-mutation between calls.
    """

    def __init__(self):
        self.applications: Dict[str, SavedApplication] = {}

    def _clone(self, obj):
        return deepcopy(obj)

    def get_application(self, app_id: str) -> Optional[SavedApplication]:
        application = self.applications.get(app_id)
        return self._clone(application) if application else None

    def save_application(self, application: SavedApplication) -> None:
        self.applications[application.id] = self._clone(application)

    def list_applications(self) -> List[SavedApplication]:
        ordered = sorted(self.applications.values(), key=lambda a: a.created_at, reverse=True)
        return [self._clone(a) for a in ordered]

    def delete_application(self, app_id: str) -> None:
        self.applications.pop(app_id, None)

    def clear(self) -> None:
        self.applications.clear()


class SqlAlchemyApplicationRepository(ApplicationRepository):
    """
    SQL-backed repository using SQLAlchemy. Works with SQLite/Postgres URLs.
    """

    def __init__(self, database_url: str):
        self.engine = create_engine(database_url, future=True)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False, future=True)

    def _session(self) -> Session:
        return self.SessionLocal()

    def _to_record(self, model: ApplicationModel) -> SavedApplication:
        match_analysis = None
        if model.match_score is not None:
            match_analysis = MatchAnalysis(
                score=model.match_score,
                reasoning=model.match_reasoning or "",
                missing_keywords=json.loads(model.missing_keywords_json or "[]"),
            )
        return SavedApplication(
            id=model.id,
            name=model.name,
            job_description=model.job_description or "",
            resume=model.resume or "",
            tone=model.tone or "",
            generated_content=model.generated_content,
            match_analysis=match_analysis,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def get_application(self, app_id: str) -> Optional[SavedApplication]:
        with self._session() as session:
            model = session.get(ApplicationModel, app_id)
            if not model:
                return None
            return self._to_record(model)

    def save_application(self, application: SavedApplication) -> None:
        analysis = application.match_analysis
        with self._session() as session:
            model = ApplicationModel(
                id=application.id,
                name=application.name,
                job_description=application.job_description,
                resume=application.resume,
                tone=application.tone,
                generated_content=application.generated_content,
                match_score=analysis.score if analysis else None,
                match_reasoning=analysis.reasoning if analysis else None,
                missing_keywords_json=json.dumps(analysis.missing_keywords) if analysis else None,
                created_at=application.created_at,
                updated_at=application.updated_at,
            )
            session.merge(model)
            session.commit()

    def list_applications(self) -> List[SavedApplication]:
        with self._session() as session:
            stmt = select(ApplicationModel).order_by(ApplicationModel.created_at.desc())
            models = session.execute(stmt).scalars().all()
            return [self._to_record(m) for m in models]

    def delete_application(self, app_id: str) -> None:
        with self._session() as session:
            session.execute(delete(ApplicationModel).where(ApplicationModel.id == app_id))
            session.commit()

    def clear(self) -> None:
        with self._session() as session:
            session.execute(delete(ApplicationModel))
            session.commit()
