"""Defaults — the typed, namespaced front door to a preference store."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, TextIO, TypeVar, overload

from prefspace import codec, operations
from prefspace.exceptions import ConfigurationError
from prefspace.factory import create_selector
from prefspace.keys import KeyGroup, describe
from prefspace.namespace import group_prefix, physical_key
from prefspace.selector import StoreSelector
from prefspace.stores.memory import MemoryStore

if TYPE_CHECKING:
    from prefspace.config import PrefspaceConfig
    from prefspace.selector import NamedStoreFactory
    from prefspace.stores.base import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Defaults:
    """Typed access to preferences declared as :class:`KeyGroup` members.

    Each logical key is mapped to ``<group prefix><name>`` and read from or
    written to the store its group selects.  Values of the store's native
    kinds go straight through; anything else is stored as a JSON blob.

    Parameters:
        store: The default store.  Defaults to a fresh :class:`MemoryStore`
               when omitted.
        host_namespace_id: Identifier of the host application, used to
               prefix groups without an explicit prefix.
        store_factory: Opens stores for groups that name one.  Without it,
               such groups raise :class:`ConfigurationError`.
        selector: Ready-made selector; replaces *store* and *store_factory*.
        debug: Enables :meth:`print_all` output.

    Example:
        >>> class Settings(KeyGroup):
        ...     theme = auto()
        >>> prefs = Defaults(host_namespace_id="com.acme.app")
        >>> prefs.set(Settings.theme, "dark")
        >>> prefs.physical_key(Settings.theme)
        'com.acme.app.defaults.theme'
    """

    def __init__(
        self,
        store: Store | None = None,
        *,
        host_namespace_id: str | None = None,
        store_factory: NamedStoreFactory | None = None,
        selector: StoreSelector | None = None,
        debug: bool = False,
    ) -> None:
        self._selector = selector or StoreSelector(store or MemoryStore(), store_factory)
        self._host_namespace_id = host_namespace_id
        self._debug = debug

    @classmethod
    def from_config(cls, config: PrefspaceConfig) -> Defaults:
        """Build an instance, and its stores, from a :class:`PrefspaceConfig`."""
        return cls(
            host_namespace_id=config.host_namespace_id,
            selector=create_selector(config.store),
            debug=config.debug,
        )

    @property
    def host_namespace_id(self) -> str | None:
        return self._host_namespace_id

    @property
    def selector(self) -> StoreSelector:
        return self._selector

    # ── key mapping ──────────────────────────────────────────

    def physical_key(self, key: KeyGroup) -> str:
        """Return the string a logical key is stored under.

        Binding layers use this, with :meth:`store_for`, to observe a key.
        """
        return physical_key(key, self._host_namespace_id)

    def prefix_for(self, group: type[KeyGroup]) -> str:
        return group_prefix(group, self._host_namespace_id)

    def store_for(self, target: type[KeyGroup] | KeyGroup) -> Store:
        """Return the store backing a group or key.

        Raises:
            ConfigurationError: if the group names a store that cannot be opened.
        """
        return self._selector.store_for(target)

    # ── typed access ─────────────────────────────────────────

    @overload
    def get(self, key: KeyGroup, type_: type[T]) -> T: ...

    @overload
    def get(self, key: KeyGroup, type_: type[T], default: T) -> T: ...

    @overload
    def get(self, key: KeyGroup, type_: Any, default: Any = None) -> Any: ...

    def get(self, key: KeyGroup, type_: Any, default: Any = None) -> Any:
        """Read *key* as *type_*.

        Absent bool/int/float keys read as ``False``/``0``/``0.0``; every
        other absent key, and a stored blob that no longer decodes, reads as
        *default*.  Never raises for bad stored data.
        """
        return codec.read_value(self.store_for(key), self.physical_key(key), type_, default)

    def set(self, key: KeyGroup, value: Any, type_: Any | None = None) -> None:
        """Write *value* to *key*.  ``None`` removes the key.

        The declared *type_* selects the representation; when omitted the
        runtime type of *value* is used.
        """
        codec.write_value(self.store_for(key), self.physical_key(key), value, type_)

    def remove(self, key: KeyGroup) -> None:
        self.store_for(key).remove(self.physical_key(key))

    def contains(self, key: KeyGroup) -> bool:
        """Return ``True`` if *key* has an explicit value or a registered default."""
        return self.store_for(key).contains(self.physical_key(key))

    # ── explicit codec ───────────────────────────────────────

    def encode(self, value: Any, key: KeyGroup, type_: Any | None = None) -> None:
        """Serialize *value* to JSON and store it under *key*.

        Raises:
            SerializationError: if *value* cannot be serialized.
        """
        name = self.physical_key(key)
        blob = codec.encode_value(value, type_, key=name)
        self.store_for(key).set(name, blob)

    def decode(self, key: KeyGroup, type_: Any) -> Any:
        """Load and deserialize the JSON blob stored under *key*.

        Returns:
            The decoded value, or ``None`` if nothing is stored.

        Raises:
            DeserializationError: if the stored blob cannot be decoded.
        """
        name = self.physical_key(key)
        blob = self.store_for(key).get_bytes(name)
        if blob is None:
            return None
        return codec.decode_value(blob, type_, key=name)

    # ── namespace operations ─────────────────────────────────

    def register_defaults(
        self,
        group: type[KeyGroup],
        values: Mapping[KeyGroup, Any],
        reset: bool = False,
    ) -> None:
        """Register fallback values for keys of *group*.

        A registered default is returned by reads only while no explicit
        value is stored.  With ``reset=True`` every value and default under
        the group's prefix is dropped first.  Not atomic.

        Raises:
            ConfigurationError: if a key does not belong to *group*.
            SerializationError: if a structured default cannot be serialized.
        """
        descriptor = describe(group)
        mapped: dict[str, Any] = {}
        for key, value in values.items():
            if not isinstance(key, group):
                raise ConfigurationError(descriptor.name, f"{key!r} is not a key of this group")
            name = self.physical_key(key)
            mapped[name] = codec.encode_default(value, key=name)
        operations.register_defaults(
            self.store_for(group), self.prefix_for(group), mapped, reset=reset
        )

    def enumerate(self, group: type[KeyGroup]) -> Iterator[tuple[str, Any]]:
        """Yield ``(physical_key, stored_value)`` for every key under the group's prefix."""
        return operations.iter_namespace(self.store_for(group), self.prefix_for(group))

    def print_all(self, group: type[KeyGroup], file: TextIO | None = None) -> None:
        """Print every key under the group's prefix.  Silent unless ``debug`` is on."""
        if not self._debug:
            logger.debug("print_all(%s) suppressed: debug is off", group.__qualname__)
            return
        operations.print_all(self.store_for(group), self.prefix_for(group), file)

    def delete_all(self, group: type[KeyGroup]) -> int:
        """Remove every stored value under the group's prefix.  Not atomic.

        Returns:
            The number of keys removed.
        """
        return operations.delete_all(self.store_for(group), self.prefix_for(group))

    def close(self) -> None:
        """Close the named stores this instance opened."""
        self._selector.close()
