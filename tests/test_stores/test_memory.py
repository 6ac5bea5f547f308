"""Tests for MemoryStore and the shared Store accessors."""

from datetime import UTC, datetime

import pytest
from pydantic import AnyUrl

from prefspace.stores import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


def test_get_nonexistent(store):
    assert store.get_object("k") is None
    assert store.read("k") is None


def test_set_and_get(store):
    store.set("k", "v")
    assert store.get_object("k") == "v"


def test_overwrite(store):
    store.set("k", 1)
    store.set("k", 2)
    assert store.get_int("k") == 2


def test_remove(store):
    store.set("k", 1)
    store.remove("k")
    assert store.get_object("k") is None


def test_remove_nonexistent(store):
    store.remove("nope")  # should not raise


def test_set_none_removes(store):
    store.set("k", 1)
    store.set("k", None)
    assert not store.contains("k")


def test_set_rejects_non_native(store):
    with pytest.raises(TypeError, match="not a native store type"):
        store.set("k", {"a": 1})


def test_keys(store):
    store.set("a", 1)
    store.set("b", 2)
    assert sorted(store.keys()) == ["a", "b"]


def test_close_discards_data(store):
    store.set("a", 1)
    store.close()
    assert store.list_keys() == []


def test_name():
    assert MemoryStore().name is None
    assert MemoryStore("suite").name == "suite"


# ── registration domain ──────────────────────────────────────


def test_registered_default_visible_until_set(store):
    store.register_defaults({"k": "default"})
    assert store.get_string("k") == "default"
    store.set("k", "explicit")
    assert store.get_string("k") == "explicit"
    store.remove("k")
    assert store.get_string("k") == "default"


def test_registered_defaults_are_not_persisted(store):
    store.register_defaults({"k": 1})
    assert store.list_keys() == []
    assert store.keys() == ["k"]


def test_keys_lists_each_key_once(store):
    store.register_defaults({"k": 1})
    store.set("k", 2)
    assert store.keys() == ["k"]


def test_unregister_default(store):
    store.register_defaults({"k": 1})
    store.unregister_default("k")
    assert store.get_object("k") is None
    assert store.registered_defaults() == {}


def test_register_none_unregisters(store):
    store.register_defaults({"k": 1})
    store.register_defaults({"k": None})
    assert store.registered_defaults() == {}


def test_register_rejects_non_native(store):
    with pytest.raises(TypeError):
        store.register_defaults({"ok": 1, "bad": [1, 2]})
    assert store.registered_defaults() == {}


def test_snapshot(store):
    store.register_defaults({"a": 1, "b": 2})
    store.set("b", 3)
    assert store.snapshot() == {"a": 1, "b": 3}


# ── typed accessors ──────────────────────────────────────────


@pytest.mark.parametrize(
    ("stored", "expected"),
    [(True, True), (0, False), (2, True), ("YES", True), ("true", True), ("0", False), ("no", False), (b"x", False)],
)
def test_get_bool(store, stored, expected):
    store.set("k", stored)
    assert store.get_bool("k") is expected


@pytest.mark.parametrize(
    ("stored", "expected"),
    [(True, 1), (7, 7), (7.9, 7), ("12", 12), ("3.5", 3), ("abc", 0), ("inf", 0), (b"1", 0)],
)
def test_get_int(store, stored, expected):
    store.set("k", stored)
    assert store.get_int("k") == expected


@pytest.mark.parametrize(("stored", "expected"), [(2, 2.0), ("1.5", 1.5), ("x", 0.0), (False, 0.0)])
def test_get_float(store, stored, expected):
    store.set("k", stored)
    assert store.get_float("k") == expected


def test_absent_numeric_accessors(store):
    assert store.get_bool("k") is False
    assert store.get_int("k") == 0
    assert store.get_float("k") == 0.0


@pytest.mark.parametrize(("stored", "expected"), [("s", "s"), (5, "5"), (1.5, "1.5"), (True, None), (b"x", None)])
def test_get_string(store, stored, expected):
    store.set("k", stored)
    assert store.get_string("k") == expected


def test_get_bytes(store):
    store.set("k", b"\x00")
    assert store.get_bytes("k") == b"\x00"
    store.set("k", "text")
    assert store.get_bytes("k") is None


def test_get_datetime(store):
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    store.set("k", moment)
    assert store.get_datetime("k") == moment
    store.set("k", "2024-01-02")
    assert store.get_datetime("k") is None


def test_get_url(store):
    store.set("k", AnyUrl("https://example.com/a"))
    assert str(store.get_url("k")) == "https://example.com/a"
    store.set("k", "not a url")
    assert store.get_url("k") is None
    store.set("k", 5)
    assert store.get_url("k") is None
