"""prefspace — typed, namespaced access to a flat preference store.

Keys are declared as closed groups, mapped to ``<prefix><name>`` physical
keys, and values are stored natively or as JSON blobs depending on their
declared type.
"""

import logging

from prefspace.builtin_keys import AppKeys
from prefspace.config import PrefspaceConfig, StoreConfigSchema
from prefspace.defaults import Defaults
from prefspace.exceptions import (
    ConfigurationError,
    DeserializationError,
    PrefspaceError,
    SerializationError,
    StoreError,
)
from prefspace.keys import KeyGroup, KeyGroupDescriptor, NamespaceConfig, describe, namespace
from prefspace.namespace import FALLBACK_PREFIX, physical_key, resolve_prefix
from prefspace.stores import MemoryStore, SQLiteStore, Store

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FALLBACK_PREFIX",
    "AppKeys",
    "ConfigurationError",
    "Defaults",
    "DeserializationError",
    "KeyGroup",
    "KeyGroupDescriptor",
    "MemoryStore",
    "NamespaceConfig",
    "PrefspaceConfig",
    "PrefspaceError",
    "SQLiteStore",
    "SerializationError",
    "Store",
    "StoreConfigSchema",
    "StoreError",
    "describe",
    "namespace",
    "physical_key",
    "resolve_prefix",
]
