"""Namespace resolution and key mapping.

Physical keys follow one convention, which is also the on-disk contract of
this package::

    <resolved prefix><logical name>

The prefix of a key group is chosen by precedence:

1. the group's explicit prefix            -> ``"custom.prefix."``
2. the host application's namespace id    -> ``"com.acme.app.defaults."``
3. the library fallback                   -> ``"prefspace.defaults."``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prefspace.keys import KeyGroup, NamespaceConfig, group_of

if TYPE_CHECKING:
    from prefspace.keys import KeyGroupDescriptor

SEPARATOR = "."
DEFAULTS_SEGMENT = "defaults"
FALLBACK_PREFIX = f"prefspace{SEPARATOR}{DEFAULTS_SEGMENT}{SEPARATOR}"

_STRIP = SEPARATOR + " \t\r\n"


def normalize(text: str | None) -> str:
    """Trim whitespace and separators from both ends of *text*."""
    if not text:
        return ""
    return text.strip(_STRIP)


def resolve_prefix(config: NamespaceConfig | None, host_namespace_id: str | None) -> str:
    """Return the key prefix for a group, always ending in one separator.

    Never raises; an explicit prefix or host id that normalizes to an empty
    string falls through to the next level.
    """
    explicit = normalize(config.prefix if config else None)
    if explicit:
        return explicit + SEPARATOR
    host = normalize(host_namespace_id)
    if host:
        return f"{host}{SEPARATOR}{DEFAULTS_SEGMENT}{SEPARATOR}"
    return FALLBACK_PREFIX


def group_prefix(
    group: type[KeyGroup] | KeyGroupDescriptor,
    host_namespace_id: str | None,
) -> str:
    """Resolve the prefix of a key group class or descriptor."""
    if isinstance(group, type) and issubclass(group, KeyGroup):
        config = group.namespace_config()
    else:
        config = group.config
    return resolve_prefix(config, host_namespace_id)


def physical_key(key: KeyGroup, host_namespace_id: str | None) -> str:
    """Map a logical key to the string used against the store.

    The logical name is not escaped.  Names must not themselves begin with
    another group's resolved prefix, or prefix filtering will mix groups.

    Raises:
        ConfigurationError: if the key's group is malformed.
    """
    return group_prefix(group_of(key), host_namespace_id) + key.key_name
