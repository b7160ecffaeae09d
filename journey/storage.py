"""
Key/Value Storage Slots

Stand-ins for the browser's sessionStorage (session id) and localStorage
(persisted user id). InMemoryStorage lives as long as the process;
JsonFileStorage keeps slots in a JSON file so identity survives restarts.
"""

import json
import logging
import os
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageAccessError(Exception):
    """Raised when a storage backend cannot be read or written"""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class InMemoryStorage:
    """Dictionary-backed storage, one instance per simulated tab session"""

    def __init__(self, initial: Optional[dict] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self):
        self._items.clear()


class JsonFileStorage:
    """
    Storage persisted to a single JSON file

    Every write rewrites the whole file; slots are few and small.
    """

    def __init__(self, filepath: str = "./journey_storage.json"):
        """
        Initialize file storage

        Args:
            filepath: JSON file holding the slots (created on first write)
        """
        self.filepath = filepath

    def _load(self) -> dict:
        if not os.path.exists(self.filepath):
            return {}
        try:
            with open(self.filepath, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageAccessError(f"Cannot read {self.filepath}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict):
        directory = os.path.dirname(self.filepath)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.filepath, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StorageAccessError(f"Cannot write {self.filepath}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = str(value)
        self._save(data)
        logger.debug(f"Stored {key} in {self.filepath}")

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
