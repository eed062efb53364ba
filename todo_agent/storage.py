"""Persisted key-value slot for the todo list (whole-list load/save)."""
import json
import logging
import os
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

STORAGE_KEY = "todos"


class MemoryStorage:
    """In-process slot. Nothing survives a restart."""

    def __init__(self, key: str = STORAGE_KEY):
        self.key = key
        self._slots: Dict[str, str] = {}

    def load(self) -> Optional[List[dict]]:
        raw = self._slots.get(self.key)
        return json.loads(raw) if raw else None

    def save(self, items: List[dict]):
        self._slots[self.key] = json.dumps(items, ensure_ascii=False)


class JsonFileStorage:
    """JSON object file used as a key-value store; the list lives under one key."""

    def __init__(self, path: str, key: str = STORAGE_KEY):
        self.path = path
        self.key = key

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def load(self) -> Optional[List[dict]]:
        return self._read().get(self.key)

    def save(self, items: List[dict]):
        try:
            try:
                data = self._read()
            except (OSError, ValueError):
                data = {}
            data[self.key] = items
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save todos to {self.path}: {e}")


def create_storage(settings):
    """Build the storage backend named by settings.storage_backend."""
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        from .database import SqliteStorage
        return SqliteStorage(settings.database_url)
    if backend == "json":
        return JsonFileStorage(settings.storage_path)
    raise ValueError(f"Unknown storage backend: {backend}")
