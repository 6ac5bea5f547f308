# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Configuration models for building a :class:`~prefspace.Defaults` instance.

Configuration can be given in code, loaded from a mapping (e.g. parsed
YAML/JSON) with ``PrefspaceConfig.model_validate``, or read from the
environment with :meth:`PrefspaceConfig.from_env`:

=========================  ==========================================
Variable                   Field
=========================  ==========================================
``PREFSPACE_HOST_ID``      ``host_namespace_id``
``PREFSPACE_STORE``        ``store.type`` (``memory`` or ``sqlite``)
``PREFSPACE_STORE_PATH``   ``store.path``
``PREFSPACE_DEBUG``        ``debug``
=========================  ==========================================
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from prefspace.exceptions import ConfigurationError

ENV_PREFIX = "PREFSPACE_"


class StoreConfigSchema(BaseModel):
    """Store configuration.

    Attributes:
        type: Store type ("memory" or "sqlite")
        path: Directory holding the SQLite files (for sqlite type).  The
            default store lives in ``default.sqlite3``, a store named
            ``x`` in ``x.sqlite3``.
    """

    type: str = "memory"
    path: str = ""


class PrefspaceConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        host_namespace_id: Identifier of the host application (e.g.
            ``"com.acme.app"``).  Used to build key prefixes for groups
            without an explicit prefix.
        store: Store configuration
        debug: Enables diagnostic output such as ``Defaults.print_all``
    """

    host_namespace_id: str | None = None
    store: StoreConfigSchema = Field(default_factory=StoreConfigSchema)
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PrefspaceConfig:
        """Build a config from ``PREFSPACE_*`` environment variables."""
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        store: dict[str, Any] = {}

        if host_id := env.get(f"{ENV_PREFIX}HOST_ID"):
            data["host_namespace_id"] = host_id
        if store_type := env.get(f"{ENV_PREFIX}STORE"):
            store["type"] = store_type.strip().lower()
        if store_path := env.get(f"{ENV_PREFIX}STORE_PATH"):
            store["path"] = store_path
        if debug := env.get(f"{ENV_PREFIX}DEBUG"):
            data["debug"] = debug.strip()

        if store:
            data["store"] = store
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError("environment", str(exc)) from exc
