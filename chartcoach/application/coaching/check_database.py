"""
Use case: Database connectivity diagnostic.

Input: None
Output: DatabaseStatus
Side effects: Runs one trivial query when persistence is enabled.
Failure cases: None raised; a failing query is reported in the result.
"""

import logging
from typing import Optional

from chartcoach.application.coaching.dtos import DatabaseStatus
from chartcoach.domain.coaching.ports import DatabaseProbe

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "No POSTGRES_URL or DATABASE_URL found in env. App is running in fallback mode."
)


class CheckDatabaseUseCase:
    """Report whether a database is configured and answering."""

    def __init__(self, probe: Optional[DatabaseProbe], persistence_enabled: bool) -> None:
        self._probe = probe
        self._persistence_enabled = persistence_enabled

    def execute(self) -> DatabaseStatus:
        if not self._persistence_enabled or self._probe is None:
            return DatabaseStatus(ok=False, has_db=False, message=FALLBACK_MESSAGE)

        try:
            now = self._probe.server_time()
        except Exception as exc:
            logger.warning("Database probe failed: %s", type(exc).__name__)
            return DatabaseStatus(ok=False, has_db=True, error=str(exc))

        return DatabaseStatus(ok=True, has_db=True, now=now)
