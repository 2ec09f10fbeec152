"""
Key-value storage backends for persisting the Drive access token.

The sync provider only needs three operations on a string-keyed store, so any
host storage (browser local storage, a settings database, a file) can be
plugged in by subclassing `KeyValueStorage`.
"""

import os
import json
import logging
import tempfile
from abc import ABC, abstractmethod
from typing import Optional, Dict

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Minimal persistent string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage(KeyValueStorage):
    """Process-local storage, mainly for tests and short-lived sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    Storage backed by a single JSON object file.

    The file is read on every access so that several processes sharing the
    path observe each other's writes.
    """

    def __init__(self, path: str):
        """
        Initialize file storage.

        Args:
            path: Path of the JSON file; `~` is expanded and parent
                directories are created on first write.
        """
        self.path = os.path.expanduser(path)

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory or None, prefix=".storage-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
