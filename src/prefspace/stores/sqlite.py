"""SQLiteStore — durable, single-file storage backend using sqlite3."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any

from pydantic import AnyUrl

from prefspace.exceptions import StoreError
from prefspace.stores.base import Store

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS preferences (
    key   TEXT NOT NULL PRIMARY KEY,
    kind  TEXT NOT NULL,
    value BLOB NOT NULL
)
"""


def _dump(value: Any) -> tuple[str, Any]:
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "bool", "1" if value else "0"
    if isinstance(value, int):
        return "int", str(value)
    if isinstance(value, float):
        return "float", repr(value)
    if isinstance(value, str):
        return "str", value
    if isinstance(value, bytes):
        return "bytes", value
    if isinstance(value, datetime):
        return "datetime", value.isoformat()
    if isinstance(value, AnyUrl):
        return "url", str(value)
    raise TypeError(f"cannot persist {type(value).__name__}")


def _load(kind: str, raw: Any) -> Any:
    if kind == "bool":
        return raw == "1"
    if kind == "int":
        return int(raw)
    if kind == "float":
        return float(raw)
    if kind == "str":
        return raw
    if kind == "bytes":
        return bytes(raw)
    if kind == "datetime":
        return datetime.fromisoformat(raw)
    if kind == "url":
        return AnyUrl(raw)
    raise StoreError("read", f"unknown value kind {kind!r}")


class SQLiteStore(Store):
    """Persistent store backed by a single SQLite file.

    Every row keeps the native kind of its value next to the value itself so
    that reads hand back the same Python type that was written.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
        name:    Store name, or ``None`` for the default store.
    """

    def __init__(self, db_path: str | Path = "preferences.db", name: str | None = None) -> None:
        super().__init__(name)
        self._db_path = str(db_path)
        self._lock = RLock()
        self._db: sqlite3.Connection | None = None
        self._closed = False

    @property
    def db_path(self) -> str:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        if self._closed:
            raise StoreError("connect", f"store at {self._db_path!r} is closed")
        if self._db is None:
            self._db = sqlite3.connect(self._db_path, check_same_thread=False)
            self._db.execute(_CREATE_TABLE)
            self._db.commit()
        return self._db

    def open(self) -> SQLiteStore:
        """Open the database eagerly so configuration problems surface early."""
        with self._lock:
            self._connect()
        return self

    def close(self) -> None:
        with self._lock:
            if self._db is not None:
                self._db.close()
                self._db = None
            self._closed = True

    @contextmanager
    def _session(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Hold the lock around one unit of work, reporting driver errors as StoreError."""
        with self._lock:
            db = self._connect()
            try:
                yield db
            except sqlite3.Error as exc:
                raise StoreError(operation, str(exc)) from exc

    # ── Store protocol ───────────────────────────────────────

    def read(self, key: str) -> Any | None:
        with self._session("read") as db:
            row = db.execute(
                "SELECT kind, value FROM preferences WHERE key = ?",
                (key,),
            ).fetchone()
        if row is None:
            return None
        return _load(row[0], row[1])

    def write(self, key: str, value: Any) -> None:
        kind, raw = _dump(value)
        with self._session("write") as db:
            db.execute(
                "INSERT OR REPLACE INTO preferences (key, kind, value) VALUES (?, ?, ?)",
                (key, kind, raw),
            )
            db.commit()

    def delete(self, key: str) -> None:
        with self._session("delete") as db:
            db.execute("DELETE FROM preferences WHERE key = ?", (key,))
            db.commit()

    def list_keys(self) -> list[str]:
        with self._session("list_keys") as db:
            rows = db.execute("SELECT key FROM preferences").fetchall()
        return [row[0] for row in rows]
