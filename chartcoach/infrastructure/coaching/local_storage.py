"""
Adapters: key-value storage for the client-side stores.

InMemoryStorage backs tests and throwaway sessions; JsonFileStorage keeps
every key in one JSON object on disk, the way a browser keeps local
storage per origin.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from chartcoach.domain.coaching.ports import KeyValueStorage

logger = logging.getLogger(__name__)


class InMemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStorage(KeyValueStorage):
    """String values persisted in a single JSON file.

    Writes go to a sibling temp file that then replaces the original, so a
    crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except ValueError as exc:
            logger.error("Ignoring unreadable storage file %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}
