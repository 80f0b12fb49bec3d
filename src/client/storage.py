"""Client-local key-value storage.

Mirrors the browser ``localStorage`` contract: string keys, string values,
process-wide and shared by every component that holds the same instance.
"""

import os
import tempfile
from pathlib import Path
from typing import Protocol

import orjson


class KeyValueStorage(Protocol):
    """Minimal string key-value store."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""
        ...


class MemoryStorage:
    """In-process storage, lost when the process exits."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


class FileStorage:
    """Storage persisted as one JSON object in a file.

    Every write rewrites the file through a temporary file and an atomic
    rename, so a crash never leaves a half-written store behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        if not raw.strip():
            return {}
        data = orjson.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return data

    def _dump(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(orjson.dumps(items))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)
