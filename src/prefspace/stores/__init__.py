"""Storage backends for preference persistence."""

from prefspace.stores.base import NATIVE_TYPES, Store, is_native
from prefspace.stores.memory import MemoryStore
from prefspace.stores.sqlite import SQLiteStore

__all__ = ["NATIVE_TYPES", "MemoryStore", "SQLiteStore", "Store", "is_native"]
