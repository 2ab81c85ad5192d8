"""
Use cases: Read saved chart analyses.

- GetLatestChartAnalysisUseCase: newest snapshot of one pair.
- GetChartAnalysisHistoryUseCase: capped history of one pair, newest first.
- GetPairRadarUseCase: newest snapshot of every pair.

Side effects: None (read-only queries).
Failure cases: StorageError when a configured database call fails.
    In fallback mode every query returns an empty result.
"""

import logging
from typing import Optional

from chartcoach.application.coaching.dtos import (
    SOURCE_DB,
    SOURCE_FALLBACK,
    AnalysisHistoryResult,
    ChartAnalysisQuery,
    LatestAnalysisResult,
    RadarResult,
)
from chartcoach.domain.coaching.ports import ChartAnalysisRepository

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class GetLatestChartAnalysisUseCase:
    """Return the newest saved analysis for a pair."""

    def __init__(
        self,
        repository: Optional[ChartAnalysisRepository],
        persistence_enabled: bool,
    ) -> None:
        self._repository = repository
        self._persistence_enabled = persistence_enabled

    def execute(self, query: ChartAnalysisQuery) -> LatestAnalysisResult:
        if not self._persistence_enabled or self._repository is None:
            return LatestAnalysisResult(entry=None, source=SOURCE_FALLBACK)
        return LatestAnalysisResult(
            entry=self._repository.latest(query.pair), source=SOURCE_DB
        )


class GetChartAnalysisHistoryUseCase:
    """Return up to ``limit`` analyses for a pair, newest first."""

    def __init__(
        self,
        repository: Optional[ChartAnalysisRepository],
        persistence_enabled: bool,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Snapshot store; may be None when persistence is off.
            persistence_enabled: Whether reads should reach the database.
            limit: Hard cap on returned rows. Values above the default
                are clamped to it.
        """
        self._repository = repository
        self._persistence_enabled = persistence_enabled
        self._limit = max(1, min(limit, DEFAULT_HISTORY_LIMIT))

    def execute(self, query: ChartAnalysisQuery) -> AnalysisHistoryResult:
        if not self._persistence_enabled or self._repository is None:
            return AnalysisHistoryResult(entries=[], source=SOURCE_FALLBACK)

        entries = self._repository.history(query.pair, self._limit)
        logger.debug("Loaded %d analyses for %s.", len(entries), query.pair)
        return AnalysisHistoryResult(entries=entries[: self._limit], source=SOURCE_DB)


class GetPairRadarUseCase:
    """Return the newest analysis of every pair that has one."""

    def __init__(
        self,
        repository: Optional[ChartAnalysisRepository],
        persistence_enabled: bool,
    ) -> None:
        self._repository = repository
        self._persistence_enabled = persistence_enabled

    def execute(self) -> RadarResult:
        if not self._persistence_enabled or self._repository is None:
            return RadarResult(entries=[], source=SOURCE_FALLBACK)
        return RadarResult(entries=self._repository.latest_per_pair(), source=SOURCE_DB)
