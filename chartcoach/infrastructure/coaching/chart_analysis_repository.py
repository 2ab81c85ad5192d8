"""
Adapter: Chart analysis repository.

Implements the ChartAnalysisRepository port on the chart_analyses table.
Rows are inserted and read, never updated or deleted.
"""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from chartcoach.domain.coaching.entities import ChartAnalysisEntry, PairSnapshot
from chartcoach.domain.coaching.ports import ChartAnalysisRepository
from chartcoach.infrastructure.coaching.database import chart_analyses, storage_errors

logger = logging.getLogger(__name__)


def _to_entry(row: Mapping[str, Any]) -> ChartAnalysisEntry:
    return ChartAnalysisEntry(
        id=row["id"],
        pair=row["pair"],
        timeframes=row["timeframes"] or [],
        notes=row["notes"] or "",
        analysis=row["analysis_json"] or {},
        candle_ends=row["candle_ends_json"] or {},
        checklist_state=row["checklist_state_json"] or [],
        chart_images=row["chart_images_json"] or [],
        created_at=row["created_at"],
    )


class SqlChartAnalysisRepository(ChartAnalysisRepository):
    """SQLAlchemy implementation of the chart analysis store."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save(self, entry: ChartAnalysisEntry) -> None:
        statement = insert(chart_analyses).values(
            id=entry.id,
            pair=entry.pair,
            timeframes=entry.timeframes,
            notes=entry.notes,
            analysis_json=entry.analysis,
            candle_ends_json=entry.candle_ends,
            checklist_state_json=entry.checklist_state,
            chart_images_json=entry.chart_images,
            created_at=entry.created_at,
        )
        with storage_errors("save chart analysis"), self._engine.begin() as conn:
            conn.execute(statement)

    def latest(self, pair: str) -> Optional[ChartAnalysisEntry]:
        entries = self._newest_first(pair, 1, "load chart analysis")
        return entries[0] if entries else None

    def history(self, pair: str, limit: int) -> list[ChartAnalysisEntry]:
        return self._newest_first(pair, limit, "load chart analyses")

    def latest_per_pair(self) -> list[PairSnapshot]:
        """Return each pair's newest analysis.

        Uses DISTINCT ON where Postgres offers it; the first-row-per-pair
        pass below keeps other dialects correct.
        """
        c = chart_analyses.c
        statement = select(c.pair, c.analysis_json, c.created_at).order_by(
            c.pair, c.created_at.desc()
        )
        if self._engine.dialect.name == "postgresql":
            statement = statement.distinct(c.pair)

        with storage_errors("load chart analyses"), self._engine.connect() as conn:
            rows = conn.execute(statement).mappings().all()

        snapshots: list[PairSnapshot] = []
        seen: set[str] = set()
        for row in rows:
            if row["pair"] in seen:
                continue
            seen.add(row["pair"])
            snapshots.append(
                PairSnapshot(
                    pair=row["pair"],
                    analysis=row["analysis_json"] or {},
                    created_at=row["created_at"],
                )
            )
        return snapshots

    def _newest_first(
        self, pair: str, limit: int, action: str
    ) -> list[ChartAnalysisEntry]:
        statement = (
            select(chart_analyses)
            .where(chart_analyses.c.pair == pair)
            .order_by(chart_analyses.c.created_at.desc())
            .limit(limit)
        )
        with storage_errors(action), self._engine.connect() as conn:
            rows = conn.execute(statement).mappings().all()
        logger.debug("Fetched %d chart analyses for %s.", len(rows), pair)
        return [_to_entry(row) for row in rows]
