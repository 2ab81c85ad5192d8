"""
Use case: Save a chart-analysis snapshot.

Input: SaveChartAnalysisCommand
Output: SaveResult
Side effects: Inserts one chart_analyses row when persistence is enabled.
Failure cases: StorageError when a configured database call fails.
    A missing pair or an absent analysis is not a failure: the save is a no-op.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from chartcoach.application.coaching.dtos import (
    SOURCE_DB,
    SOURCE_FALLBACK,
    SOURCE_NOOP,
    SaveChartAnalysisCommand,
    SaveResult,
)
from chartcoach.domain.coaching.entities import ChartAnalysisEntry
from chartcoach.domain.coaching.ports import ChartAnalysisRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SaveChartAnalysisUseCase:
    """Orchestrates saving a snapshot.

    Incomplete input and fallback mode both report success without writing.
    """

    def __init__(
        self,
        repository: Optional[ChartAnalysisRepository],
        persistence_enabled: bool,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Snapshot store; may be None when persistence is off.
            persistence_enabled: Whether writes should reach the database.
            clock: Source of ``created_at`` timestamps.
        """
        self._repository = repository
        self._persistence_enabled = persistence_enabled
        self._clock = clock

    def execute(self, command: SaveChartAnalysisCommand) -> SaveResult:
        """Run the save chart analysis use case."""
        pair = (command.pair or "").strip()
        if not pair or command.analysis is None:
            logger.info("Skipping chart analysis save: pair or analysis missing.")
            return SaveResult(ok=True, source=SOURCE_NOOP)

        if not self._persistence_enabled or self._repository is None:
            logger.debug("Persistence disabled; chart analysis for %s not stored.", pair)
            return SaveResult(ok=True, source=SOURCE_FALLBACK)

        entry = ChartAnalysisEntry(
            id=str(uuid.uuid4()),
            pair=pair,
            timeframes=list(command.timeframes or []),
            notes=command.notes or "",
            analysis=dict(command.analysis),
            candle_ends=dict(command.candle_ends or {}),
            checklist_state=list(command.checklist_state or []),
            chart_images=list(command.chart_images or []),
            created_at=self._clock(),
        )
        self._repository.save(entry)
        logger.info("Saved chart analysis %s for %s.", entry.id, pair)
        return SaveResult(ok=True, source=SOURCE_DB, id=entry.id)
