# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Store factory for creating store selectors from configuration.

Uses the Registry pattern to map store type strings to backend builders,
allowing extensibility without modifying factory code.
"""

from __future__ import annotations

import re
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import ClassVar

from prefspace.config import StoreConfigSchema
from prefspace.exceptions import ConfigurationError
from prefspace.selector import NamedStoreFactory, StoreSelector
from prefspace.stores import MemoryStore, SQLiteStore, Store

DEFAULT_STORE_FILE = "default.sqlite3"

_STORE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

StoreBuilder = Callable[[StoreConfigSchema], tuple[Store, NamedStoreFactory]]


def memory_store_factory() -> NamedStoreFactory:
    """Return a factory creating one fresh :class:`MemoryStore` per name."""

    def create(name: str) -> Store:
        return MemoryStore(name)

    return create


def sqlite_store_factory(directory: str | Path) -> NamedStoreFactory:
    """Return a factory opening ``<directory>/<name>.sqlite3`` per name.

    Names must be plain file-name-safe identifiers; anything else (empty,
    path separators, leading dots) raises ``ValueError``.
    """
    base = Path(directory)

    def create(name: str) -> Store:
        if not _STORE_NAME.match(name) or name == Path(DEFAULT_STORE_FILE).stem:
            raise ValueError(f"invalid store name {name!r}")
        base.mkdir(parents=True, exist_ok=True)
        return SQLiteStore(base / f"{name}.sqlite3", name=name).open()

    return create


def _build_memory(config: StoreConfigSchema) -> tuple[Store, NamedStoreFactory]:
    return MemoryStore(), memory_store_factory()


def _build_sqlite(config: StoreConfigSchema) -> tuple[Store, NamedStoreFactory]:
    if not config.path:
        raise ConfigurationError("sqlite", "SQLite store requires 'path' configuration")
    base = Path(config.path)
    try:
        base.mkdir(parents=True, exist_ok=True)
        default = SQLiteStore(base / DEFAULT_STORE_FILE).open()
    except (OSError, sqlite3.Error) as exc:
        raise ConfigurationError("sqlite", f"cannot open {base}: {exc}") from exc
    return default, sqlite_store_factory(base)


class StoreFactory:
    """Creates store selectors from configuration.

    Store types are registered at class level and can be extended via the
    :meth:`register` class method.

    Example:
        selector = StoreFactory().create(StoreConfigSchema(type="sqlite", path="/tmp/prefs"))
        selector.store_for(MyKeys)
    """

    _registry: ClassVar[dict[str, StoreBuilder]] = {
        "memory": _build_memory,
        "sqlite": _build_sqlite,
    }

    @classmethod
    def register(cls, store_type: str, builder: StoreBuilder) -> None:
        """Register a builder for a new store type."""
        cls._registry[store_type] = builder

    @classmethod
    def registered_types(cls) -> list[str]:
        return sorted(cls._registry)

    def create(self, config: StoreConfigSchema) -> StoreSelector:
        """Build the default store and a selector able to open named stores.

        Raises:
            ConfigurationError: if the store type is unknown or the default
                store cannot be opened.
        """
        builder = self._registry.get(config.type)
        if builder is None:
            raise ConfigurationError(
                config.type,
                f"unknown store type (available: {', '.join(self.registered_types())})",
            )
        default, named = builder(config)
        return StoreSelector(default, named, owns_default=True)


def create_selector(config: StoreConfigSchema) -> StoreSelector:
    return StoreFactory().create(config)
