# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Custom exceptions for the device_auth package."""

from __future__ import annotations


class DeviceAuthError(Exception):
    """Base exception for all device-auth errors."""


class EntryEncodeError(DeviceAuthError):
    """Raised when an entry cannot be serialized."""


class EntryDecodeError(DeviceAuthError):
    """Raised when a stored payload cannot be parsed into an entry."""


class ConfigError(DeviceAuthError):
    """Raised when the store is misconfigured."""


class SecretStoreError(DeviceAuthError):
    """Raised when a secret-store backend rejects an operation."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Secret store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class DuplicateItemError(SecretStoreError):
    """Raised by ``put`` when the address already holds an item."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__("put", f"item already exists at '{address}'")
