"""
Adapter: Pair repository.

Implements the PairRepository port on the pairs table.
"""

import logging
from typing import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Engine

from chartcoach.domain.coaching.ports import PairRepository
from chartcoach.infrastructure.coaching.database import pairs, storage_errors

logger = logging.getLogger(__name__)


class SqlPairRepository(PairRepository):
    """Shared watchlist stored one symbol per row."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_all(self) -> list[str]:
        statement = select(pairs.c.symbol).order_by(pairs.c.symbol)
        with storage_errors("load pairs"), self._engine.connect() as conn:
            return list(conn.execute(statement).scalars())

    def replace_all(self, symbols: Sequence[str]) -> None:
        """Delete every row, then insert ``symbols``, in one transaction.

        Concurrent replacements do not interleave; the last commit wins.
        """
        with storage_errors("save pairs"), self._engine.begin() as conn:
            conn.execute(delete(pairs))
            if symbols:
                conn.execute(insert(pairs), [{"symbol": s} for s in symbols])
        logger.debug("Stored %d pairs.", len(symbols))
