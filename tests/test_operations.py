"""Tests for bulk namespace operations."""

import io
import logging
import sqlite3

import pytest

from prefspace.exceptions import StoreError
from prefspace.operations import delete_all, iter_namespace, print_all, register_defaults
from prefspace.stores import MemoryStore

PREFIX = "com.acme.app.defaults."


def fill(store):
    store.set(PREFIX + "theme", "dark")
    store.set(PREFIX + "volume", 3)
    store.set("other.defaults.theme", "light")


def test_iter_namespace_filters_by_prefix(store):
    fill(store)
    assert dict(iter_namespace(store, PREFIX)) == {
        PREFIX + "theme": "dark",
        PREFIX + "volume": 3,
    }


def test_iter_namespace_is_lazy_and_requeries(store):
    fill(store)
    first = iter_namespace(store, PREFIX)
    store.set(PREFIX + "late", True)
    assert PREFIX + "late" in dict(first)
    assert PREFIX + "late" in dict(iter_namespace(store, PREFIX))


def test_iter_namespace_skips_keys_removed_while_iterating(store):
    fill(store)
    seen = []
    for key, _ in iter_namespace(store, PREFIX):
        seen.append(key)
        store.remove(PREFIX + "volume")
        store.remove(PREFIX + "theme")
    assert len(seen) == 1


def test_iter_namespace_includes_registered_defaults(store):
    store.register_defaults({PREFIX + "speed": 1.5})
    assert dict(iter_namespace(store, PREFIX)) == {PREFIX + "speed": 1.5}
    assert dict(iter_namespace(store, PREFIX, include_defaults=False)) == {}


def test_register_defaults_without_reset_keeps_values(store):
    fill(store)
    register_defaults(store, PREFIX, {PREFIX + "theme": "light"})
    assert store.get_string(PREFIX + "theme") == "dark"


def test_register_defaults_with_reset_clears_prefix_only(store):
    fill(store)
    store.register_defaults({PREFIX + "old": 1})
    register_defaults(store, PREFIX, {PREFIX + "theme": "light"}, reset=True)

    assert store.get_string(PREFIX + "theme") == "light"
    assert store.get_object(PREFIX + "volume") is None
    assert store.get_object(PREFIX + "old") is None
    assert store.get_string("other.defaults.theme") == "light"


def test_print_all_writes_lines(store):
    fill(store)
    out = io.StringIO()
    print_all(store, PREFIX, out)
    lines = sorted(out.getvalue().splitlines())
    assert lines == [PREFIX + "theme: dark", PREFIX + "volume: 3"]


def test_print_all_never_raises(store):
    fill(store)
    out = io.StringIO()
    out.close()
    print_all(store, PREFIX, out)


class FailingStore(MemoryStore):
    def __init__(self, error):
        super().__init__()
        self.error = error

    def list_keys(self):
        raise self.error


@pytest.mark.parametrize(
    "error",
    [sqlite3.OperationalError("database is locked"), StoreError("list_keys", "gone")],
)
def test_print_all_survives_failing_store(error, caplog):
    out = io.StringIO()
    with caplog.at_level(logging.WARNING, logger="prefspace.operations"):
        print_all(FailingStore(error), PREFIX, out)
    assert out.getvalue() == ""
    assert "Could not print keys" in caplog.text


def test_delete_all_counts_and_isolates(store):
    fill(store)
    assert delete_all(store, PREFIX) == 2
    assert list(iter_namespace(store, PREFIX)) == []
    assert store.get_string("other.defaults.theme") == "light"


def test_delete_all_keeps_registered_defaults(store):
    store.register_defaults({PREFIX + "theme": "light"})
    store.set(PREFIX + "theme", "dark")
    assert delete_all(store, PREFIX) == 1
    assert store.get_string(PREFIX + "theme") == "light"


def test_delete_all_on_empty_namespace(store):
    assert delete_all(store, PREFIX) == 0
