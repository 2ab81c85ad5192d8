"""
Use case: Manage workspace projects, model profiles and videos.

Plain insert/select/delete operations with no transactional grouping.
In fallback mode reads are empty, writes return the would-be row
tagged ``fallback`` and deletes report success.
Failure cases: ProjectNotFoundError when adding to an unknown project,
    StorageError when a configured database call fails.
"""

import logging
import uuid
from typing import Optional

from chartcoach.application.coaching.dtos import (
    SOURCE_DB,
    SOURCE_FALLBACK,
    CreateModelProfileCommand,
    CreateProjectCommand,
    CreateVideoCommand,
    ItemResult,
    ItemsResult,
    SaveResult,
)
from chartcoach.domain.coaching.entities import ModelProfile, Project, Video
from chartcoach.domain.coaching.errors import MissingFieldError, ProjectNotFoundError
from chartcoach.domain.coaching.ports import WorkspaceRepository

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class ManageWorkspaceUseCase:
    """CRUD over the three workspace tables."""

    def __init__(
        self, repository: Optional[WorkspaceRepository], persistence_enabled: bool
    ) -> None:
        self._repository = repository if persistence_enabled else None

    # ── Projects ─────────────────────────────────────────────────────

    def list_projects(self) -> ItemsResult[Project]:
        if self._repository is None:
            return ItemsResult(items=[], source=SOURCE_FALLBACK)
        return ItemsResult(items=self._repository.list_projects(), source=SOURCE_DB)

    def create_project(self, command: CreateProjectCommand) -> ItemResult[Project]:
        name = command.name.strip()
        if not name:
            raise MissingFieldError("name is required")

        project = Project(id=_new_id(), name=name)
        if self._repository is None:
            return ItemResult(item=project, source=SOURCE_FALLBACK)

        saved = self._repository.create_project(project)
        logger.info("Created project %s.", saved.id)
        return ItemResult(item=saved, source=SOURCE_DB)

    def delete_project(self, project_id: str) -> SaveResult:
        if self._repository is None:
            return SaveResult(ok=True, source=SOURCE_FALLBACK)
        deleted = self._repository.delete_project(project_id)
        return SaveResult(ok=deleted, source=SOURCE_DB, id=project_id)

    # ── Model profiles ───────────────────────────────────────────────

    def list_models(self, project_id: str) -> ItemsResult[ModelProfile]:
        if self._repository is None:
            return ItemsResult(items=[], source=SOURCE_FALLBACK)
        return ItemsResult(
            items=self._repository.list_models(project_id), source=SOURCE_DB
        )

    def create_model(
        self, command: CreateModelProfileCommand
    ) -> ItemResult[ModelProfile]:
        name = command.name.strip()
        if not name:
            raise MissingFieldError("name is required")

        model = ModelProfile(
            id=_new_id(),
            project_id=command.project_id,
            name=name,
            category=command.category,
            timeframes=command.timeframes,
            duration=command.duration,
            description=command.description,
        )
        if self._repository is None:
            return ItemResult(item=model, source=SOURCE_FALLBACK)

        self._ensure_project(command.project_id)
        return ItemResult(item=self._repository.create_model(model), source=SOURCE_DB)

    def delete_model(self, model_id: str) -> SaveResult:
        if self._repository is None:
            return SaveResult(ok=True, source=SOURCE_FALLBACK)
        deleted = self._repository.delete_model(model_id)
        return SaveResult(ok=deleted, source=SOURCE_DB, id=model_id)

    # ── Videos ───────────────────────────────────────────────────────

    def list_videos(self, project_id: str) -> ItemsResult[Video]:
        if self._repository is None:
            return ItemsResult(items=[], source=SOURCE_FALLBACK)
        return ItemsResult(
            items=self._repository.list_videos(project_id), source=SOURCE_DB
        )

    def create_video(self, command: CreateVideoCommand) -> ItemResult[Video]:
        title = command.title.strip()
        if not title:
            raise MissingFieldError("title is required")

        video = Video(
            id=_new_id(),
            project_id=command.project_id,
            title=title,
            url=command.url.strip(),
            notes=command.notes,
        )
        if self._repository is None:
            return ItemResult(item=video, source=SOURCE_FALLBACK)

        self._ensure_project(command.project_id)
        return ItemResult(item=self._repository.create_video(video), source=SOURCE_DB)

    def delete_video(self, video_id: str) -> SaveResult:
        if self._repository is None:
            return SaveResult(ok=True, source=SOURCE_FALLBACK)
        deleted = self._repository.delete_video(video_id)
        return SaveResult(ok=deleted, source=SOURCE_DB, id=video_id)

    def _ensure_project(self, project_id: str) -> None:
        if self._repository.get_project(project_id) is None:
            raise ProjectNotFoundError(project_id)
