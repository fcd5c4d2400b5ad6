# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Secret-store backends for device token persistence."""

from device_auth.stores.base import Accessibility, SecretStore
from device_auth.stores.keychain import KeyringSecretStore
from device_auth.stores.memory import InMemorySecretStore
from device_auth.stores.sqlite import SQLiteSecretStore

__all__ = [
    "Accessibility",
    "InMemorySecretStore",
    "KeyringSecretStore",
    "SQLiteSecretStore",
    "SecretStore",
]
