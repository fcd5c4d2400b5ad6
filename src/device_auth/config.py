# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Configuration for the device token store.

A single :class:`StoreConfigSchema` picks the secret-store backend and the
service namespace every record is filed under.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from device_auth.exceptions import ConfigError
from device_auth.stores import (
    InMemorySecretStore,
    KeyringSecretStore,
    SecretStore,
    SQLiteSecretStore,
)

DEFAULT_SERVICE = "device-auth"


class StoreConfigSchema(BaseModel):
    """Store configuration.

    Attributes:
        service: Namespace all records are stored under
        backend: Backend type ("memory", "sqlite" or "keyring")
        path: Path to SQLite database file (for sqlite backend)
    """

    service: str = DEFAULT_SERVICE
    backend: Literal["memory", "sqlite", "keyring"] = "memory"
    path: str = ""


def create_secret_store(config: StoreConfigSchema) -> SecretStore:
    """Create a secret-store backend from configuration.

    Args:
        config: Store configuration

    Returns:
        SecretStore instance

    Raises:
        ConfigError: If the sqlite backend is selected without a path
    """
    if config.backend == "sqlite":
        if not config.path:
            raise ConfigError("SQLite backend requires 'path' configuration")
        return SQLiteSecretStore(config.path)
    if config.backend == "keyring":
        return KeyringSecretStore()
    return InMemorySecretStore()
