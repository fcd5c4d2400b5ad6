# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""InMemorySecretStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from device_auth.exceptions import DuplicateItemError
from device_auth.stores.base import Accessibility, SecretStore


@dataclass(frozen=True)
class StoredItem:
    label: str
    payload: bytes
    accessibility: Accessibility


class InMemorySecretStore(SecretStore):
    """In-memory store using nested dicts.  Data is lost on process exit."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, StoredItem]] = defaultdict(dict)

    async def put(
        self,
        service: str,
        address: str,
        *,
        label: str,
        payload: bytes,
        accessibility: Accessibility,
    ) -> None:
        if address in self._data[service]:
            raise DuplicateItemError(address)
        self._data[service][address] = StoredItem(label, payload, accessibility)

    async def delete(self, service: str, address: str) -> bool:
        return self._data[service].pop(address, None) is not None

    async def delete_by_label(self, service: str, label: str) -> int:
        items = self._data[service]
        doomed = [address for address, item in items.items() if item.label == label]
        for address in doomed:
            del items[address]
        return len(doomed)

    async def find_one(self, service: str, address: str) -> bytes | None:
        item = self._data[service].get(address)
        return item.payload if item else None

    def item(self, service: str, address: str) -> StoredItem | None:
        """Return the raw stored item, label and policy included."""
        return self._data[service].get(address)

    def addresses(self, service: str) -> list[str]:
        """Return every address within *service*."""
        return list(self._data[service].keys())
