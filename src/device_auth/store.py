# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""DeviceAuthStore — per-device, per-role token persistence.

Device tokens are issued by the gateway after successful pairing.  They are
filed in a secret store under both the device id and the role:

* after a successful connect, store the issued token
* on reconnect, load it to include in the connect params
* if the gateway rejects it (expired/revoked), clear it and re-pair

No operation raises.  Failures resolve to ``None`` or a silent no-op and are
only logged, so a corrupted record looks exactly like a missing one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from device_auth._internal.clock import Clock, SystemClock, epoch_ms
from device_auth.config import DEFAULT_SERVICE, StoreConfigSchema, create_secret_store
from device_auth.entry import DeviceAuthEntry, decode_entry, encode_entry
from device_auth.exceptions import EntryDecodeError, EntryEncodeError, SecretStoreError
from device_auth.keys import derive_key, normalize_role, normalize_scopes
from device_auth.stores.base import Accessibility, SecretStore

logger = logging.getLogger(__name__)


def _short(device_id: str) -> str:
    return f"{device_id[:8]}..."


class DeviceAuthStore:
    """Stores, loads and clears gateway tokens keyed by ``(device_id, role)``.

    Parameters:
        secrets:  Secret-store backend.
        service:  Namespace every record is filed under.
        clock:    Injectable clock for ``updated_at_ms``.
    """

    ACCESSIBILITY = Accessibility.WHEN_UNLOCKED_THIS_DEVICE_ONLY

    def __init__(
        self,
        secrets: SecretStore,
        *,
        service: str = DEFAULT_SERVICE,
        clock: Clock | None = None,
    ) -> None:
        self._secrets = secrets
        self._service = service
        self._clock = clock or SystemClock()

    @classmethod
    def from_config(
        cls,
        config: StoreConfigSchema,
        *,
        clock: Clock | None = None,
    ) -> DeviceAuthStore:
        """Build a store and its backend from *config*."""
        return cls(create_secret_store(config), service=config.service, clock=clock)

    @property
    def service(self) -> str:
        return self._service

    @property
    def secrets(self) -> SecretStore:
        return self._secrets

    async def close(self) -> None:
        await self._secrets.close()

    # ── public API ───────────────────────────────────────────

    async def store_token(
        self,
        device_id: str,
        role: str,
        token: str,
        scopes: Iterable[str] = (),
    ) -> DeviceAuthEntry | None:
        """Store *token* for *device_id* and *role*, replacing any previous one.

        An empty token is accepted and persisted, though ``load_token``
        will report it as absent.

        Returns:
            The stored entry, or ``None`` if encoding or the write failed.
        """
        entry = DeviceAuthEntry(
            token=token,
            role=normalize_role(role),
            scopes=normalize_scopes(scopes),
            updated_at_ms=epoch_ms(self._clock),
        )
        key = derive_key(device_id, entry.role)

        try:
            payload = encode_entry(entry)
        except EntryEncodeError as exc:
            logger.error("Failed to encode entry: %s", exc)
            return None

        logger.debug(
            "Saving token: account=%s, deviceId=%s, role=%s",
            key.address,
            _short(device_id),
            entry.role,
        )
        try:
            await self._secrets.replace(
                self._service,
                key.address,
                label=key.label,
                payload=payload,
                accessibility=self.ACCESSIBILITY,
            )
        except SecretStoreError as exc:
            logger.error("Failed to save token: %s", exc)
            return None

        logger.debug("Token saved successfully for account=%s", key.address)
        return entry

    async def load_token(self, device_id: str, role: str) -> DeviceAuthEntry | None:
        """Return the stored entry, or ``None`` if missing, unreadable or empty."""
        key = derive_key(device_id, role)
        logger.debug(
            "Loading token: account=%s, deviceId=%s, role=%s",
            key.address,
            _short(device_id),
            normalize_role(role),
        )

        try:
            payload = await self._secrets.find_one(self._service, key.address)
        except SecretStoreError as exc:
            logger.error("Secret store query failed: %s", exc)
            return None
        if payload is None:
            logger.debug("No token found for account=%s", key.address)
            return None

        try:
            entry = decode_entry(payload)
        except EntryDecodeError as exc:
            logger.error("Failed to decode entry for account=%s: %s", key.address, exc)
            return None

        if not entry.token:
            logger.warning("Token is empty for account=%s", key.address)
            return None

        logger.debug("Token loaded successfully for account=%s", key.address)
        return entry

    async def clear_token(self, device_id: str, role: str) -> None:
        """Remove the token for *device_id* and *role*.  No-op if absent."""
        key = derive_key(device_id, role)
        try:
            await self._secrets.delete(self._service, key.address)
        except SecretStoreError as exc:
            logger.error("Failed to delete token: %s", exc)

    async def clear_all_tokens(self, device_id: str) -> None:
        """Remove every token stored for *device_id*, whatever its role."""
        try:
            removed = await self._secrets.delete_by_label(self._service, device_id)
        except SecretStoreError as exc:
            logger.error("Failed to delete tokens for deviceId=%s: %s", _short(device_id), exc)
            return
        logger.debug("Cleared %d token(s) for deviceId=%s", removed, _short(device_id))
