"""Shared test fixtures."""

import pytest

from prefspace import Defaults
from prefspace.factory import memory_store_factory
from prefspace.stores import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def prefs(store):
    return Defaults(
        store,
        host_namespace_id="com.acme.app",
        store_factory=memory_store_factory(),
        debug=True,
    )


@pytest.fixture
def bare_prefs(store):
    """Defaults without a host namespace id, so groups fall back to the library prefix."""
    return Defaults(store)
