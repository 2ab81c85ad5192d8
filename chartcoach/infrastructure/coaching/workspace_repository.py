"""
Adapter: Workspace repository.

Implements the WorkspaceRepository port on the projects, models and
videos tables. ``created_at`` is stamped here when the entity has none.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from sqlalchemy import Table, delete, insert, select
from sqlalchemy.engine import Engine

from chartcoach.domain.coaching.entities import ModelProfile, Project, Video
from chartcoach.domain.coaching.ports import WorkspaceRepository
from chartcoach.infrastructure.coaching.database import (
    models,
    projects,
    storage_errors,
    videos,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_project(row: Mapping[str, Any]) -> Project:
    return Project(id=row["id"], name=row["name"], created_at=row["created_at"])


def _to_model(row: Mapping[str, Any]) -> ModelProfile:
    return ModelProfile(
        id=row["id"],
        project_id=row["project_id"],
        name=row["name"],
        category=row["category"] or "",
        timeframes=row["timeframes"] or "",
        duration=row["duration"] or "",
        description=row["description"] or "",
        created_at=row["created_at"],
    )


def _to_video(row: Mapping[str, Any]) -> Video:
    return Video(
        id=row["id"],
        project_id=row["project_id"],
        title=row["title"],
        url=row["url"] or "",
        notes=row["notes"] or "",
        created_at=row["created_at"],
    )


class SqlWorkspaceRepository(WorkspaceRepository):
    """SQLAlchemy implementation of projects, model profiles and videos."""

    def __init__(
        self, engine: Engine, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._engine = engine
        self._clock = clock

    # ── Projects ─────────────────────────────────────────────────────

    def list_projects(self) -> list[Project]:
        statement = select(projects).order_by(projects.c.created_at)
        return [_to_project(r) for r in self._fetch(statement, "load projects")]

    def get_project(self, project_id: str) -> Optional[Project]:
        statement = select(projects).where(projects.c.id == project_id)
        rows = self._fetch(statement, "load project")
        return _to_project(rows[0]) if rows else None

    def create_project(self, project: Project) -> Project:
        stamped = Project(
            id=project.id,
            name=project.name,
            created_at=project.created_at or self._clock(),
        )
        self._insert(projects, "create project", id=stamped.id, name=stamped.name,
                     created_at=stamped.created_at)
        return stamped

    def delete_project(self, project_id: str) -> bool:
        # SQLite only honours ON DELETE CASCADE with a pragma, so children go first.
        with storage_errors("delete project"), self._engine.begin() as conn:
            conn.execute(delete(models).where(models.c.project_id == project_id))
            conn.execute(delete(videos).where(videos.c.project_id == project_id))
            result = conn.execute(delete(projects).where(projects.c.id == project_id))
        return result.rowcount > 0

    # ── Model profiles ───────────────────────────────────────────────

    def list_models(self, project_id: str) -> list[ModelProfile]:
        statement = (
            select(models)
            .where(models.c.project_id == project_id)
            .order_by(models.c.created_at)
        )
        return [_to_model(r) for r in self._fetch(statement, "load models")]

    def get_model(self, model_id: str) -> Optional[ModelProfile]:
        statement = select(models).where(models.c.id == model_id)
        rows = self._fetch(statement, "load model")
        return _to_model(rows[0]) if rows else None

    def create_model(self, model: ModelProfile) -> ModelProfile:
        stamped = ModelProfile(
            id=model.id,
            project_id=model.project_id,
            name=model.name,
            category=model.category,
            timeframes=model.timeframes,
            duration=model.duration,
            description=model.description,
            created_at=model.created_at or self._clock(),
        )
        self._insert(
            models,
            "create model",
            id=stamped.id,
            project_id=stamped.project_id,
            name=stamped.name,
            category=stamped.category,
            timeframes=stamped.timeframes,
            duration=stamped.duration,
            description=stamped.description,
            created_at=stamped.created_at,
        )
        return stamped

    def delete_model(self, model_id: str) -> bool:
        return self._delete(models, model_id, "delete model")

    # ── Videos ───────────────────────────────────────────────────────

    def list_videos(
        self, project_id: str, limit: Optional[int] = None
    ) -> list[Video]:
        statement = (
            select(videos)
            .where(videos.c.project_id == project_id)
            .order_by(videos.c.created_at)
        )
        if limit is not None:
            statement = statement.limit(limit)
        return [_to_video(r) for r in self._fetch(statement, "load videos")]

    def get_video(self, video_id: str) -> Optional[Video]:
        statement = select(videos).where(videos.c.id == video_id)
        rows = self._fetch(statement, "load video")
        return _to_video(rows[0]) if rows else None

    def create_video(self, video: Video) -> Video:
        stamped = Video(
            id=video.id,
            project_id=video.project_id,
            title=video.title,
            url=video.url,
            notes=video.notes,
            created_at=video.created_at or self._clock(),
        )
        self._insert(
            videos,
            "create video",
            id=stamped.id,
            project_id=stamped.project_id,
            title=stamped.title,
            url=stamped.url,
            notes=stamped.notes,
            created_at=stamped.created_at,
        )
        return stamped

    def delete_video(self, video_id: str) -> bool:
        return self._delete(videos, video_id, "delete video")

    # ── Helpers ──────────────────────────────────────────────────────

    def _fetch(self, statement, action: str) -> list[Mapping[str, Any]]:
        with storage_errors(action), self._engine.connect() as conn:
            return list(conn.execute(statement).mappings().all())

    def _insert(self, table: Table, action: str, **values: Any) -> None:
        with storage_errors(action), self._engine.begin() as conn:
            conn.execute(insert(table).values(**values))
        logger.debug("Inserted %s row %s.", table.name, values.get("id"))

    def _delete(self, table: Table, row_id: str, action: str) -> bool:
        with storage_errors(action), self._engine.begin() as conn:
            result = conn.execute(delete(table).where(table.c.id == row_id))
        return result.rowcount > 0
