# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""SecretStore protocol — typed key/value persistence for secret payloads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class Accessibility(str, Enum):
    """When a stored item may be read, mirroring platform keychain classes."""

    WHEN_UNLOCKED = "when_unlocked"
    WHEN_UNLOCKED_THIS_DEVICE_ONLY = "when_unlocked_this_device_only"
    AFTER_FIRST_UNLOCK = "after_first_unlock"
    AFTER_FIRST_UNLOCK_THIS_DEVICE_ONLY = "after_first_unlock_this_device_only"


class SecretStore(ABC):
    """Abstract base for all secret-store backends.

    Items live in a *service* namespace and are addressed by an ``address``
    string, unique within the service.  Each item also carries a ``label``
    that several items may share, so a group of them can be deleted in one
    request.  The store treats payloads as opaque bytes.

    Backends raise :class:`~device_auth.exceptions.SecretStoreError` for
    failures; "not found" is never an error.
    """

    @abstractmethod
    async def put(
        self,
        service: str,
        address: str,
        *,
        label: str,
        payload: bytes,
        accessibility: Accessibility,
    ) -> None:
        """Add a new item.

        Raises:
            DuplicateItemError: An item already exists at *address*.
        """
        ...

    @abstractmethod
    async def delete(self, service: str, address: str) -> bool:
        """Delete an item.  Return ``False`` if nothing was there."""
        ...

    @abstractmethod
    async def delete_by_label(self, service: str, label: str) -> int:
        """Delete every item carrying *label*.  Return how many were removed."""
        ...

    @abstractmethod
    async def find_one(self, service: str, address: str) -> bytes | None:
        """Return the payload at *address*, or ``None`` if not found."""
        ...

    async def replace(
        self,
        service: str,
        address: str,
        *,
        label: str,
        payload: bytes,
        accessibility: Accessibility,
    ) -> None:
        """Unconditionally replace whatever is at *address*.

        The default deletes then adds.  The pair is not atomic: a reader may
        see no item in between, and a failed ``put`` leaves the address
        empty.  Backends with a native upsert override this.
        """
        await self.delete(service, address)
        await self.put(
            service,
            address,
            label=label,
            payload=payload,
            accessibility=accessibility,
        )

    async def close(self) -> None:
        """Release backend resources.  No-op by default."""
