"""StoreSelector — picks the physical store that backs a key group."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from threading import Lock

from prefspace.exceptions import ConfigurationError
from prefspace.keys import KeyGroup, NamespaceConfig, group_of
from prefspace.stores.base import Store

logger = logging.getLogger(__name__)

NamedStoreFactory = Callable[[str], Store]


class StoreSelector:
    """Resolves a key group's declared store name to a store instance.

    Groups without a store name use the default store.  Named stores are
    created on first use through *factory* and cached for the lifetime of
    the selector.  A name that cannot be opened is a fatal configuration
    error: there is no fallback to the default store.

    Parameters:
        default: The process default store.
        factory: Callable creating a store for a given name.  When omitted,
                 any group naming a store raises :class:`ConfigurationError`.
        owns_default: Close the default store in :meth:`close` as well.
    """

    def __init__(
        self,
        default: Store,
        factory: NamedStoreFactory | None = None,
        *,
        owns_default: bool = False,
    ) -> None:
        self._default = default
        self._owns_default = owns_default
        self._factory = factory
        self._named: dict[str, Store] = {}
        self._lock = Lock()

    @property
    def default(self) -> Store:
        return self._default

    def store_for(self, target: type[KeyGroup] | KeyGroup | NamespaceConfig | None) -> Store:
        """Return the store backing *target* (a group, one of its keys, or a config)."""
        if isinstance(target, KeyGroup):
            target = group_of(target)
        if isinstance(target, type) and issubclass(target, KeyGroup):
            target = target.namespace_config()
        name = target.store if target is not None else None
        if name is None:
            return self._default
        return self.named(name)

    def named(self, name: str) -> Store:
        """Return the store called *name*, opening it on first use."""
        with self._lock:
            store = self._named.get(name)
            if store is not None:
                return store
            store = self._open(name)
            self._named[name] = store
            return store

    def _open(self, name: str) -> Store:
        if not name.strip():
            raise ConfigurationError(repr(name), "store name must not be empty")
        if self._factory is None:
            raise ConfigurationError(name, "named stores are not available without a store factory")
        try:
            store = self._factory(name)
        except (OSError, sqlite3.Error, ValueError) as exc:
            raise ConfigurationError(name, f"cannot open store: {exc}") from exc
        logger.debug("Opened named store %r", name)
        return store

    def named_stores(self) -> list[str]:
        with self._lock:
            return list(self._named)

    def close(self) -> None:
        """Close every named store opened by this selector.

        The default store stays open unless the selector owns it.
        """
        with self._lock:
            stores = list(self._named.values())
            self._named.clear()
        if self._owns_default:
            stores.append(self._default)
        for store in stores:
            store.close()
