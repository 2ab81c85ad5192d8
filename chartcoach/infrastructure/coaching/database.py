"""
Adapter: SQL schema, engine factory and connectivity probe.

The schema is declared once with SQLAlchemy Core and created
idempotently at process start, never per request. JSON columns map to
JSONB on Postgres and to plain JSON elsewhere (SQLite in tests).
"""

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Sequence

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from chartcoach.domain.coaching.errors import StorageError
from chartcoach.domain.coaching.pairs import DEFAULT_PAIRS
from chartcoach.domain.coaching.ports import DatabaseProbe

logger = logging.getLogger(__name__)

JSONDocument = JSON().with_variant(JSONB(), "postgresql")

metadata = MetaData()

chart_analyses = Table(
    "chart_analyses",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("pair", Text, nullable=False),
    Column("timeframes", JSONDocument, nullable=False),
    Column("notes", Text),
    Column("analysis_json", JSONDocument, nullable=False),
    Column("candle_ends_json", JSONDocument),
    Column("checklist_state_json", JSONDocument),
    Column("chart_images_json", JSONDocument),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
Index("ix_chart_analyses_pair_created_at", chart_analyses.c.pair, chart_analyses.c.created_at)

pairs = Table(
    "pairs",
    metadata,
    Column("symbol", Text, primary_key=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

projects = Table(
    "projects",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

models = Table(
    "models",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "project_id",
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("category", Text),
    Column("timeframes", Text),
    Column("duration", Text),
    Column("description", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

videos = Table(
    "videos",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "project_id",
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("title", Text, nullable=False),
    Column("url", Text),
    Column("notes", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


@lru_cache(maxsize=4)
def get_engine(url: str) -> Engine:
    """Return the process-wide engine for a database URL."""
    return create_engine(url, pool_pre_ping=True)


def initialize_schema(
    engine: Engine, seed_pairs: Sequence[str] = DEFAULT_PAIRS
) -> None:
    """Create missing tables and seed the watchlist when it is empty.

    Safe to run on every start: existing tables and rows are untouched.
    """
    metadata.create_all(engine)
    with engine.begin() as conn:
        stored = conn.execute(select(func.count()).select_from(pairs)).scalar_one()
        if stored == 0 and seed_pairs:
            conn.execute(insert(pairs), [{"symbol": s} for s in seed_pairs])
            logger.info("Seeded %d default pairs.", len(seed_pairs))
    logger.info("Database schema ready (%s).", engine.dialect.name)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate driver errors into StorageError for ``action``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error while trying to %s: %s", action, type(exc).__name__)
        raise StorageError(action, str(exc)) from exc


class SqlDatabaseProbe(DatabaseProbe):
    """Connectivity check that asks the database for its clock."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def server_time(self) -> str:
        with self._engine.connect() as conn:
            value = conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
        return value.isoformat() if hasattr(value, "isoformat") else str(value)
