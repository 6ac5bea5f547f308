"""Store protocol — flat, synchronous key-value persistence for preferences."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
from threading import RLock
from typing import Any

from pydantic import AnyUrl, TypeAdapter, ValidationError

#: Value types a store persists as-is.  Anything else must be serialized
#: to ``bytes`` by the caller first.
NATIVE_TYPES: tuple[type, ...] = (bool, int, float, str, bytes, datetime, AnyUrl)

_TRUE_STRINGS = frozenset({"yes", "true", "y", "t"})

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def is_native(value: Any) -> bool:
    """Return ``True`` if *value* can be handed to :meth:`Store.set` unchanged."""
    return isinstance(value, NATIVE_TYPES)


class Store(ABC):
    """Abstract base for all preference stores.

    A store is a flat ``str -> value`` map.  Keys carry no structure of
    their own; namespacing is done entirely by key prefixes chosen by the
    caller.

    Each store also owns a *registration domain*: defaults registered with
    :meth:`register_defaults` are kept in memory for the lifetime of the
    instance and are returned by reads only while no explicit value is
    stored for the key.  They are never persisted.

    Subclasses implement the five raw operations (``read``, ``write``,
    ``delete``, ``list_keys``, ``close``); the typed accessors are built
    on top of them.

    Parameters:
        name: Store name, or ``None`` for the process default store.
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._registered: dict[str, Any] = {}
        self._registration_lock = RLock()

    @property
    def name(self) -> str | None:
        return self._name

    # ── raw persistence ──────────────────────────────────────

    @abstractmethod
    def read(self, key: str) -> Any | None:
        """Return the explicitly stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        """Create or overwrite an explicit value.  *value* is always native."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete an explicit value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    def list_keys(self) -> list[str]:
        """Return every key holding an explicit value."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release any resources held by the store."""
        ...

    # ── generic access ───────────────────────────────────────

    def get_object(self, key: str) -> Any | None:
        """Return the explicit value, else the registered default, else ``None``."""
        value = self.read(key)
        if value is not None:
            return value
        with self._registration_lock:
            return self._registered.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store a native value.  ``None`` removes the key."""
        if value is None:
            self.remove(key)
            return
        if not is_native(value):
            raise TypeError(
                f"{type(value).__name__} is not a native store type; serialize it to bytes first"
            )
        self.write(key, value)

    def remove(self, key: str) -> None:
        """Remove the explicit value.  A registered default becomes visible again."""
        self.delete(key)

    def contains(self, key: str) -> bool:
        return self.get_object(key) is not None

    def keys(self) -> list[str]:
        """Return explicit keys followed by keys that only have a registered default."""
        explicit = self.list_keys()
        seen = set(explicit)
        with self._registration_lock:
            registered = [k for k in self._registered if k not in seen]
        return explicit + registered

    def snapshot(self) -> dict[str, Any]:
        """Return a ``{key: value}`` copy of everything visible in the store."""
        result: dict[str, Any] = {}
        for key in self.keys():
            value = self.get_object(key)
            if value is not None:
                result[key] = value
        return result

    # ── registration domain ──────────────────────────────────

    def register_defaults(self, defaults: Mapping[str, Any]) -> None:
        """Install fallback values returned when no explicit value is stored."""
        for key, value in defaults.items():
            if value is not None and not is_native(value):
                raise TypeError(
                    f"default for '{key}' is {type(value).__name__}, not a native store type"
                )
        with self._registration_lock:
            for key, value in defaults.items():
                if value is None:
                    self._registered.pop(key, None)
                else:
                    self._registered[key] = value

    def unregister_default(self, key: str) -> None:
        with self._registration_lock:
            self._registered.pop(key, None)

    def registered_defaults(self) -> dict[str, Any]:
        with self._registration_lock:
            return dict(self._registered)

    # ── typed accessors ──────────────────────────────────────

    def get_bool(self, key: str) -> bool:
        """Return the value as a bool; ``False`` when absent or not convertible."""
        value = self.get_object(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            return _parse_float(text) not in (None, 0.0)
        return False

    def get_int(self, key: str) -> int:
        """Return the value as an int; ``0`` when absent or not convertible."""
        value = self.get_object(key)
        if isinstance(value, (bool, int)):
            return int(value)
        if isinstance(value, str):
            value = _parse_float(value)
        if isinstance(value, float) and math.isfinite(value):
            return int(value)
        return 0

    def get_float(self, key: str) -> float:
        """Return the value as a float; ``0.0`` when absent or not convertible."""
        value = self.get_object(key)
        if isinstance(value, (bool, int, float)):
            return float(value)
        if isinstance(value, str):
            number = _parse_float(value)
            return number if number is not None else 0.0
        return 0.0

    def get_string(self, key: str) -> str | None:
        value = self.get_object(key)
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    def get_bytes(self, key: str) -> bytes | None:
        value = self.get_object(key)
        return value if isinstance(value, bytes) else None

    def get_datetime(self, key: str) -> datetime | None:
        value = self.get_object(key)
        return value if isinstance(value, datetime) else None

    def get_url(self, key: str) -> AnyUrl | None:
        value = self.get_object(key)
        if isinstance(value, AnyUrl):
            return value
        if isinstance(value, str):
            try:
                return _URL_ADAPTER.validate_python(value)
            except ValidationError:
                return None
        return None


def _parse_float(text: str) -> float | None:
    try:
        return float(text.strip())
    except ValueError:
        return None
