# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""KeyringSecretStore — items kept in the platform credential vault via ``keyring``."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import threading
from typing import Any

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from device_auth.exceptions import DuplicateItemError, SecretStoreError
from device_auth.stores.base import Accessibility, SecretStore

logger = logging.getLogger(__name__)

_INDEX_PREFIX = "#label:"


def _index_name(label: str) -> str:
    return f"{_INDEX_PREFIX}{label}"


class KeyringSecretStore(SecretStore):
    """Secret store on top of the system keyring.

    Each item is saved as ``(service, address)`` with a JSON envelope that
    carries its label, access policy and base64 payload.  Keyring cannot
    query by label, so a second item ``(service, "#label:<label>")`` lists
    the addresses of that label and ``delete_by_label`` walks it.

    The access policy is recorded, not enforced: enforcement belongs to the
    platform keyring.  Keyring calls block, so they run in a worker thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    # ── SecretStore protocol ─────────────────────────────────

    async def put(
        self,
        service: str,
        address: str,
        *,
        label: str,
        payload: bytes,
        accessibility: Accessibility,
    ) -> None:
        await asyncio.to_thread(self._put, service, address, label, payload, accessibility)

    async def delete(self, service: str, address: str) -> bool:
        return await asyncio.to_thread(self._delete, service, address)

    async def delete_by_label(self, service: str, label: str) -> int:
        return await asyncio.to_thread(self._delete_by_label, service, label)

    async def find_one(self, service: str, address: str) -> bytes | None:
        envelope = await asyncio.to_thread(self._read_envelope, service, address)
        if envelope is None:
            return None
        try:
            return base64.b64decode(envelope["payload"], validate=True)
        except (KeyError, TypeError, ValueError) as exc:
            raise SecretStoreError("find_one", f"malformed item at '{address}'") from exc

    # ── blocking helpers ─────────────────────────────────────

    def _put(
        self,
        service: str,
        address: str,
        label: str,
        payload: bytes,
        accessibility: Accessibility,
    ) -> None:
        envelope = json.dumps(
            {
                "label": label,
                "accessibility": accessibility.value,
                "payload": base64.b64encode(payload).decode("ascii"),
            }
        )
        with self._lock:
            if self._get(service, address) is not None:
                raise DuplicateItemError(address)
            # Index first: an item missing from its label index would
            # survive delete_by_label.  A stale index entry is harmless.
            addresses = self._read_index(service, label)
            if address not in addresses:
                addresses.append(address)
                self._write_index(service, label, addresses)
            self._set(service, address, envelope)

    def _delete(self, service: str, address: str) -> bool:
        with self._lock:
            try:
                envelope = self._read_envelope(service, address)
            except SecretStoreError:
                # Unreadable item: still remove it, but its label is unknown.
                envelope = {}
            if not self._remove(service, address):
                return False
            label = envelope.get("label") if envelope else None
            if isinstance(label, str):
                addresses = self._read_index(service, label)
                if address in addresses:
                    addresses.remove(address)
                    self._write_index(service, label, addresses)
            return True

    def _delete_by_label(self, service: str, label: str) -> int:
        with self._lock:
            removed = 0
            for address in self._read_index(service, label):
                if self._remove(service, address):
                    removed += 1
            self._remove(service, _index_name(label))
            return removed

    def _read_envelope(self, service: str, address: str) -> dict[str, Any] | None:
        raw = self._get(service, address)
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
        except ValueError as exc:
            raise SecretStoreError("find_one", f"malformed item at '{address}'") from exc
        if not isinstance(envelope, dict):
            raise SecretStoreError("find_one", f"malformed item at '{address}'")
        return envelope

    def _read_index(self, service: str, label: str) -> list[str]:
        raw = self._get(service, _index_name(label))
        if raw is None:
            return []
        try:
            addresses = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable label index for service=%s", service)
            return []
        if not isinstance(addresses, list):
            return []
        return [a for a in addresses if isinstance(a, str)]

    def _write_index(self, service: str, label: str, addresses: list[str]) -> None:
        if addresses:
            self._set(service, _index_name(label), json.dumps(addresses))
        else:
            self._remove(service, _index_name(label))

    # ── keyring calls ────────────────────────────────────────

    @staticmethod
    def _get(service: str, username: str) -> str | None:
        try:
            return keyring.get_password(service, username)
        except KeyringError as exc:
            raise SecretStoreError("get", str(exc)) from exc

    @staticmethod
    def _set(service: str, username: str, value: str) -> None:
        try:
            keyring.set_password(service, username, value)
        except KeyringError as exc:
            raise SecretStoreError("set", str(exc)) from exc

    @staticmethod
    def _remove(service: str, username: str) -> bool:
        try:
            keyring.delete_password(service, username)
        except PasswordDeleteError:
            return False
        except KeyringError as exc:
            raise SecretStoreError("delete", str(exc)) from exc
        return True
