"""
Snapshot Storage

Key-value persistence port used by the catalog store, with a JSON file
adapter for real sessions and an in-memory adapter for tests.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SnapshotStorage(ABC):
    """Durable key-value storage for serialized catalog state."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored text for key, or None if absent."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key if present."""


class InMemoryStorage(SnapshotStorage):
    """Dictionary-backed storage, for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes = 0

    def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes += 1

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage(SnapshotStorage):
    """
    Stores all keys in a single JSON object on disk.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash mid-write never leaves a truncated snapshot.

    Usage:
        storage = JsonFileStorage("data/catalog_state.json")
        storage.write("file_name", "lista.pdf")
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: not a JSON object", self.path)
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".catalog-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def read(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
