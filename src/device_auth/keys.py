# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Key derivation — maps ``(device_id, role)`` to a storage address and label."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

ADDRESS_SEPARATOR = "."


@dataclass(frozen=True)
class StorageKey:
    """Where a single entry lives in the secret store.

    Attributes:
        address: Unique per ``(device_id, normalized role)``.
        label:   The raw device id.  Shared by every entry of a device and
                 used only for bulk deletion, never for uniqueness.
    """

    address: str
    label: str


def normalize_role(role: str) -> str:
    return role.strip().lower()


def normalize_scopes(scopes: Iterable[str] | None) -> list[str]:
    """Trim each scope, drop empties and duplicates, and sort ascending."""
    if not scopes:
        return []
    return sorted({s.strip() for s in scopes if s.strip()})


def derive_key(device_id: str, role: str) -> StorageKey:
    """Build the storage key for *device_id* and *role*.

    The role is normalized first, so ``"Admin"`` and ``" admin "`` share an
    address.  Empty strings are accepted as-is.
    """
    address = f"{device_id}{ADDRESS_SEPARATOR}{normalize_role(role)}"
    return StorageKey(address=address, label=device_id)
