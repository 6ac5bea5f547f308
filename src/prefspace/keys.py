"""Key groups — closed, named sets of logical preference keys.

A key group is an :class:`enum.Enum` subclass of :class:`KeyGroup`.  Each
member is a *logical key*; its value is the logical name used to build the
physical store key::

    @namespace(prefix="com.acme.player")
    class PlayerKeys(KeyGroup):
        volume = auto()           # logical name "volume"
        last_track = "lastTrack"  # explicit logical name

Namespace configuration is optional.  It can be attached with the
:func:`namespace` decorator or a ``__namespace__`` class attribute holding
a :class:`NamespaceConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from enum import Enum
from typing import Any, TypeVar

from prefspace.exceptions import ConfigurationError

G = TypeVar("G", bound=type["KeyGroup"])


@dataclass(frozen=True)
class NamespaceConfig:
    """Optional per-group override of the key prefix and/or the backing store.

    Attributes:
        prefix: Explicit key prefix (e.g. ``"com.acme.player"``).  Takes
                precedence over the host namespace id.
        store:  Name of the store holding this group's keys.  ``None``
                selects the default store.
    """

    prefix: str | None = None
    store: str | None = None


_EMPTY_CONFIG = NamespaceConfig()


class KeyGroup(Enum):
    """Base class for key groups.  Subclass it and declare members."""

    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, last_values: list[Any]) -> str:
        return name

    @property
    def key_name(self) -> str:
        """The logical name of this key within its group."""
        return str(self.value)

    @classmethod
    def namespace_config(cls) -> NamespaceConfig:
        config = cls.__dict__.get("__namespace__")
        return config if isinstance(config, NamespaceConfig) else _EMPTY_CONFIG


def namespace(*, prefix: str | None = None, store: str | None = None):
    """Class decorator attaching a :class:`NamespaceConfig` to a key group."""

    def decorate(cls: G) -> G:
        if not (isinstance(cls, type) and issubclass(cls, KeyGroup)):
            raise TypeError("@namespace can only decorate KeyGroup subclasses")
        setattr(cls, "__namespace__", NamespaceConfig(prefix=prefix, store=store))
        return cls

    return decorate


@dataclass(frozen=True)
class KeyGroupDescriptor:
    """Plain-value view of a key group: its name, logical key names and config."""

    name: str
    keys: tuple[str, ...]
    config: NamespaceConfig


def describe(group: type[KeyGroup]) -> KeyGroupDescriptor:
    """Validate *group* and return its descriptor.

    Raises:
        ConfigurationError: if a member value is not a non-empty string, or
            if two members share one logical name (which ``Enum`` would
            otherwise turn into a silent alias).
    """
    name = group.__qualname__
    for member_name, member in group.__members__.items():
        if not isinstance(member.value, str) or not member.value:
            raise ConfigurationError(
                name, f"key {member_name!r} must have a non-empty string name"
            )
        if member.name != member_name:
            raise ConfigurationError(
                name,
                f"key {member_name!r} reuses the logical name {member.value!r} of {member.name!r}",
            )
    return KeyGroupDescriptor(
        name=name,
        keys=tuple(member.value for member in group),
        config=group.namespace_config(),
    )


@lru_cache(maxsize=None)
def _checked(group: type[KeyGroup]) -> KeyGroupDescriptor:
    return describe(group)


def group_of(key: KeyGroup) -> type[KeyGroup]:
    """Return the key group a logical key belongs to.

    The group is validated with :func:`describe` the first time one of its
    keys is used; a malformed group raises on every use.

    Raises:
        ConfigurationError: if the group is malformed.
    """
    group = type(key)
    _checked(group)
    return group
