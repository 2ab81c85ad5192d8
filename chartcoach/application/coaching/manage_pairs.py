"""
Use cases: Read and replace the shared pair watchlist.

Input: nothing (read) / a raw list of symbols (replace)
Output: PairListResult
Side effects: Replacing deletes every stored symbol, then inserts the
    cleaned list.
Failure cases: StorageError when a configured database call fails.
"""

import logging
from typing import Any, Iterable, Optional

from chartcoach.application.coaching.dtos import (
    SOURCE_DB,
    SOURCE_FALLBACK,
    PairListResult,
)
from chartcoach.domain.coaching.pairs import DEFAULT_PAIRS, normalize_pairs
from chartcoach.domain.coaching.ports import PairRepository

logger = logging.getLogger(__name__)


class GetPairsUseCase:
    """Return the stored watchlist, or the default five pairs in fallback mode."""

    def __init__(
        self, repository: Optional[PairRepository], persistence_enabled: bool
    ) -> None:
        self._repository = repository
        self._persistence_enabled = persistence_enabled

    def execute(self) -> PairListResult:
        if not self._persistence_enabled or self._repository is None:
            return PairListResult(pairs=list(DEFAULT_PAIRS), source=SOURCE_FALLBACK)
        return PairListResult(pairs=self._repository.list_all(), source=SOURCE_DB)


class SavePairsUseCase:
    """Replace the stored watchlist wholesale with a cleaned symbol list."""

    def __init__(
        self, repository: Optional[PairRepository], persistence_enabled: bool
    ) -> None:
        self._repository = repository
        self._persistence_enabled = persistence_enabled

    def execute(self, symbols: Iterable[Any]) -> PairListResult:
        """Run the save pairs use case.

        Args:
            symbols: Raw symbols as submitted; cleaned before storing.

        Returns:
            The cleaned list, tagged with where it went.
        """
        cleaned = normalize_pairs(symbols)

        if not self._persistence_enabled or self._repository is None:
            return PairListResult(pairs=cleaned, source=SOURCE_FALLBACK)

        self._repository.replace_all(cleaned)
        logger.info("Replaced pair watchlist with %d symbols.", len(cleaned))
        return PairListResult(pairs=cleaned, source=SOURCE_DB)
