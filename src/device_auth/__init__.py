# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""device_auth — secure per-device, per-role credential storage.

Tokens issued by a gateway after pairing are filed under
``(device_id, role)`` in a pluggable secret store.  Writes replace,
reads treat corrupt or empty records as absent, and a whole device can
be forgotten in one call.
"""

from device_auth.config import StoreConfigSchema, create_secret_store
from device_auth.entry import DeviceAuthEntry
from device_auth.exceptions import (
    ConfigError,
    DeviceAuthError,
    DuplicateItemError,
    EntryDecodeError,
    EntryEncodeError,
    SecretStoreError,
)
from device_auth.store import DeviceAuthStore

__all__ = [
    "ConfigError",
    "DeviceAuthEntry",
    "DeviceAuthError",
    "DeviceAuthStore",
    "DuplicateItemError",
    "EntryDecodeError",
    "EntryEncodeError",
    "SecretStoreError",
    "StoreConfigSchema",
    "create_secret_store",
]
