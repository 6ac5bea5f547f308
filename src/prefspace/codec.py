"""Value codec — typed reads and writes against a store.

Every read and write is dispatched on the *declared* type through a closed
table of value kinds.  Store-native kinds pass straight through to the
store's typed accessors; every other type is structured and travels as a
JSON byte blob produced by a pydantic :class:`~pydantic.TypeAdapter`.

Read semantics when the key is absent:

============  ==================================================
Kind          Result
============  ==================================================
BOOL          ``False`` (caller default if the type is optional)
INT           ``0`` (caller default if the type is optional)
FLOAT         ``0.0`` (caller default if the type is optional)
TEXT          caller default
BLOB          caller default
TIMESTAMP     caller default
LOCATOR       caller default
STRUCTURED    caller default
============  ==================================================

The implicit ``read_value`` path never raises on bad data: a blob that
fails to decode is logged and treated as absent.  The explicit
``encode_value``/``decode_value`` path raises instead.
"""

from __future__ import annotations

import logging
import types
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import AnyUrl, TypeAdapter
from pydantic.errors import PydanticUserError

from prefspace.exceptions import DeserializationError, SerializationError
from prefspace.stores.base import Store, is_native

logger = logging.getLogger(__name__)


class ValueKind(Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    TEXT = "text"
    BLOB = "blob"
    TIMESTAMP = "timestamp"
    LOCATOR = "locator"
    STRUCTURED = "structured"


_NATIVE_KINDS: dict[type, ValueKind] = {
    bool: ValueKind.BOOL,
    int: ValueKind.INT,
    float: ValueKind.FLOAT,
    str: ValueKind.TEXT,
    bytes: ValueKind.BLOB,
    datetime: ValueKind.TIMESTAMP,
}

_NUMERIC_KINDS = frozenset({ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT})


def _unwrap_optional(type_: Any) -> tuple[Any, bool]:
    origin = get_origin(type_)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(type_) if arg is not type(None)]
        if len(args) == 1 and len(args) < len(get_args(type_)):
            return args[0], True
    return type_, False


def classify(type_: Any) -> tuple[ValueKind, bool]:
    """Return ``(kind, optional)`` for a declared type.

    ``X | None`` and ``Optional[X]`` are unwrapped to ``X``.  Only exact
    native types map to native kinds; subclasses (``IntEnum`` members and
    the like) are structured so they survive a round trip unchanged.
    """
    inner, optional = _unwrap_optional(type_)
    if not isinstance(inner, type) or get_origin(inner) is not None:
        return ValueKind.STRUCTURED, optional
    kind = _NATIVE_KINDS.get(inner)
    if kind is None and issubclass(inner, AnyUrl):
        kind = ValueKind.LOCATOR
    return kind or ValueKind.STRUCTURED, optional


def declared_type(value: Any, type_: Any | None) -> Any:
    """Return *type_*, or the runtime type of *value* when none is declared."""
    return type(value) if type_ is None else type_


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


# Serialization and validation failures are ValueErrors (or TypeErrors for
# mismatched values).  A type pydantic cannot build a schema for raises
# PydanticSchemaGenerationError, a PydanticUserError, on first use.
_CODEC_ERRORS = (ValueError, TypeError, PydanticUserError)


def _dump_json(value: Any, type_: Any) -> bytes:
    return _adapter(type_).dump_json(value)


# ── implicit path ───────────────────────────────────────────


def read_value(store: Store, key: str, type_: Any, default: Any = None) -> Any:
    """Read *key* from *store* as *type_*.  Never raises on bad stored data."""
    kind, optional = classify(type_)

    if kind in _NUMERIC_KINDS:
        if optional and not store.contains(key):
            return default
        if kind is ValueKind.BOOL:
            return store.get_bool(key)
        if kind is ValueKind.INT:
            return store.get_int(key)
        return store.get_float(key)

    if kind is ValueKind.TEXT:
        text = store.get_string(key)
        return default if text is None else text
    if kind is ValueKind.BLOB:
        blob = store.get_bytes(key)
        return default if blob is None else blob
    if kind is ValueKind.TIMESTAMP:
        moment = store.get_datetime(key)
        return default if moment is None else moment
    if kind is ValueKind.LOCATOR:
        url = store.get_url(key)
        return default if url is None else url

    blob = store.get_bytes(key)
    if blob is None:
        return default
    inner, _ = _unwrap_optional(type_)
    try:
        return _adapter(inner).validate_json(blob)
    except _CODEC_ERRORS as exc:
        logger.warning("Error decoding value for key %s: %s", key, exc)
        return default


def write_value(store: Store, key: str, value: Any, type_: Any | None = None) -> None:
    """Write *value* under *key*.  ``None`` removes the key whatever its type.

    A structured value that cannot be serialized is logged and the key is
    removed, so a stale value never outlives a failed write.

    Raises:
        TypeError: if *type_* is a native type but *value* is not a native
            store value.
    """
    if value is None:
        store.remove(key)
        return

    kind, _ = classify(declared_type(value, type_))
    if kind is not ValueKind.STRUCTURED:
        if not is_native(value):
            raise TypeError(
                f"value for {key!r} is declared as {kind.value} "
                f"but got {type(value).__name__}"
            )
        store.set(key, value)
        return

    inner, _ = _unwrap_optional(declared_type(value, type_))
    try:
        blob = _dump_json(value, inner)
    except _CODEC_ERRORS as exc:
        logger.warning("Error encoding value for key %s: %s", key, exc)
        store.remove(key)
        return
    store.set(key, blob)


def encode_default(value: Any, type_: Any | None = None, *, key: str = "<value>") -> Any:
    """Return the stored form of *value*: native values as-is, others as JSON bytes.

    Raises:
        SerializationError: if a structured value cannot be serialized.
    """
    if value is None:
        return None
    kind, _ = classify(declared_type(value, type_))
    if kind is not ValueKind.STRUCTURED:
        return value
    return encode_value(value, type_, key=key)


# ── explicit path ───────────────────────────────────────────


def encode_value(value: Any, type_: Any | None = None, *, key: str = "<value>") -> bytes:
    """Serialize *value* to a JSON blob regardless of its kind.

    Raises:
        SerializationError: if the value cannot be serialized.
    """
    inner, _ = _unwrap_optional(declared_type(value, type_))
    try:
        return _dump_json(value, inner)
    except _CODEC_ERRORS as exc:
        raise SerializationError(key, str(exc)) from exc


def decode_value(blob: bytes, type_: Any, *, key: str = "<value>") -> Any:
    """Deserialize a JSON blob produced by :func:`encode_value`.

    Raises:
        DeserializationError: if the blob is not valid for *type_*.
    """
    inner, _ = _unwrap_optional(type_)
    try:
        return _adapter(inner).validate_json(blob)
    except _CODEC_ERRORS as exc:
        raise DeserializationError(key, str(exc)) from exc
