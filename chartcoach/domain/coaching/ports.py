"""
Port interfaces (ABCs) for the coaching bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from chartcoach.domain.coaching.entities import (
    ChartAnalysisEntry,
    ModelProfile,
    PairSnapshot,
    Project,
    Video,
)


class ChartAnalysisRepository(ABC):
    """Port for the append-only store of chart-analysis snapshots."""

    @abstractmethod
    def save(self, entry: ChartAnalysisEntry) -> None:
        """Insert a new snapshot."""
        raise NotImplementedError

    @abstractmethod
    def latest(self, pair: str) -> Optional[ChartAnalysisEntry]:
        """Return the newest snapshot for a pair, or None."""
        raise NotImplementedError

    @abstractmethod
    def history(self, pair: str, limit: int) -> list[ChartAnalysisEntry]:
        """Return up to ``limit`` snapshots for a pair, newest first."""
        raise NotImplementedError

    @abstractmethod
    def latest_per_pair(self) -> list[PairSnapshot]:
        """Return the newest snapshot of every pair, pairs ascending."""
        raise NotImplementedError


class PairRepository(ABC):
    """Port for the shared pair watchlist."""

    @abstractmethod
    def list_all(self) -> list[str]:
        """Return every stored symbol, ascending."""
        raise NotImplementedError

    @abstractmethod
    def replace_all(self, symbols: Sequence[str]) -> None:
        """Delete every stored symbol, then insert ``symbols``."""
        raise NotImplementedError


class WorkspaceRepository(ABC):
    """Port for projects and the model profiles and videos they own."""

    @abstractmethod
    def list_projects(self) -> list[Project]:
        raise NotImplementedError

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        raise NotImplementedError

    @abstractmethod
    def create_project(self, project: Project) -> Project:
        raise NotImplementedError

    @abstractmethod
    def delete_project(self, project_id: str) -> bool:
        """Delete a project and everything it owns. Return False if absent."""
        raise NotImplementedError

    @abstractmethod
    def list_models(self, project_id: str) -> list[ModelProfile]:
        """Return a project's model profiles, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def get_model(self, model_id: str) -> Optional[ModelProfile]:
        raise NotImplementedError

    @abstractmethod
    def create_model(self, model: ModelProfile) -> ModelProfile:
        raise NotImplementedError

    @abstractmethod
    def delete_model(self, model_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_videos(
        self, project_id: str, limit: Optional[int] = None
    ) -> list[Video]:
        """Return a project's videos, oldest first, optionally capped."""
        raise NotImplementedError

    @abstractmethod
    def get_video(self, video_id: str) -> Optional[Video]:
        raise NotImplementedError

    @abstractmethod
    def create_video(self, video: Video) -> Video:
        raise NotImplementedError

    @abstractmethod
    def delete_video(self, video_id: str) -> bool:
        raise NotImplementedError


class DatabaseProbe(ABC):
    """Port for the connectivity diagnostic."""

    @abstractmethod
    def server_time(self) -> str:
        """Run a trivial query and return the database clock as text."""
        raise NotImplementedError


class LLMPort(ABC):
    """Port for a single chat-completion round trip."""

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when provider credentials are present."""
        raise NotImplementedError

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: Optional[int] = None,
        images: Sequence[str] = (),
    ) -> str:
        """Return the model's reply text.

        Args:
            system_prompt: Instructions for the model.
            user_prompt: The task text.
            temperature: Sampling temperature.
            max_tokens: Optional cap on completion tokens.
            images: Data URLs attached to the user turn.

        Raises:
            ProviderNotConfiguredError: No API key is configured.
            LLMProviderError: The round trip failed.
        """
        raise NotImplementedError


class PromptCatalog(ABC):
    """Port for the named prompt templates used by generation tasks."""

    @abstractmethod
    def render(self, task: str, **values: object) -> tuple[str, str]:
        """Return ``(system_prompt, user_prompt)`` for a task."""
        raise NotImplementedError

    @abstractmethod
    def temperature(self, task: str) -> float:
        """Return the sampling temperature configured for a task."""
        raise NotImplementedError


class KeyValueStorage(ABC):
    """Port for the client-side string store (browser local storage)."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        raise NotImplementedError
