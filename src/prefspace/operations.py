"""Bulk operations over every key sharing one prefix in a store.

None of these are transactional.  Each is a sequence of independent store
calls, so a crash or a concurrent writer can leave a namespace partially
cleared or partially registered.
"""

from __future__ import annotations

import logging
import sqlite3
import sys
from collections.abc import Iterator, Mapping
from typing import Any, TextIO

from prefspace.exceptions import StoreError
from prefspace.stores.base import Store

logger = logging.getLogger(__name__)


def iter_namespace(
    store: Store,
    prefix: str,
    *,
    include_defaults: bool = True,
) -> Iterator[tuple[str, Any]]:
    """Yield ``(physical_key, stored_value)`` for every key starting with *prefix*.

    The store is queried afresh each time the generator is created.  Keys
    that disappear while iterating are skipped.  Order is whatever the
    store returns and must not be relied on.

    With ``include_defaults=False`` only explicitly stored values are
    yielded; keys that merely have a registered default are left out.
    """
    keys = store.keys() if include_defaults else store.list_keys()
    for key in keys:
        if not key.startswith(prefix):
            continue
        value = store.get_object(key) if include_defaults else store.read(key)
        if value is None:
            continue
        yield key, value


def register_defaults(
    store: Store,
    prefix: str,
    defaults: Mapping[str, Any],
    *,
    reset: bool = False,
) -> None:
    """Register store-level defaults for physical keys under *prefix*.

    With ``reset=True`` every explicit value and every registered default
    under *prefix* is dropped first, so the new defaults are what reads
    return afterwards.
    """
    if reset:
        for key in [k for k in store.keys() if k.startswith(prefix)]:
            store.remove(key)
            store.unregister_default(key)
    store.register_defaults(defaults)


def print_all(store: Store, prefix: str, file: TextIO | None = None) -> None:
    """Write a ``key: value`` line for every key under *prefix*.  Never raises."""
    out = file if file is not None else sys.stdout
    try:
        for key, value in iter_namespace(store, prefix):
            print(f"{key}: {value}", file=out)
    except (OSError, ValueError, sqlite3.Error, StoreError) as exc:
        logger.warning("Could not print keys under %r: %s", prefix, exc)


def delete_all(store: Store, prefix: str) -> int:
    """Remove every explicitly stored value under *prefix*.

    Registered defaults are not stored values and stay in place.  Keys added
    by another writer while this runs may or may not be removed.

    Returns:
        The number of keys removed.
    """
    removed = 0
    for key, _ in iter_namespace(store, prefix, include_defaults=False):
        store.remove(key)
        removed += 1
    return removed
