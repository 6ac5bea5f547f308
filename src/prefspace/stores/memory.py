"""MemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

from threading import RLock
from typing import Any

from prefspace.stores.base import Store


class MemoryStore(Store):
    """In-memory store using a flat dict.  Data is lost on process exit."""

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name)
        self._lock = RLock()
        self._data: dict[str, Any] = {}

    def read(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def list_keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def close(self) -> None:
        with self._lock:
            self._data.clear()
