# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""SQLiteSecretStore — durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

from typing import Any

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteSecretStore requires the 'aiosqlite' package. "
        "Install it with: pip install aiosqlite"
    ) from exc

from device_auth.exceptions import DuplicateItemError, SecretStoreError
from device_auth.stores.base import Accessibility, SecretStore

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS secret_items (
    service       TEXT NOT NULL,
    address       TEXT NOT NULL,
    label         TEXT NOT NULL,
    accessibility TEXT NOT NULL,
    payload       BLOB NOT NULL,
    PRIMARY KEY (service, address)
)
"""

_CREATE_LABEL_INDEX = """
CREATE INDEX IF NOT EXISTS secret_items_label ON secret_items (service, label)
"""

_INSERT = (
    "INSERT INTO secret_items (service, address, label, accessibility, payload) "
    "VALUES (?, ?, ?, ?, ?)"
)
_DELETE = "DELETE FROM secret_items WHERE service = ? AND address = ?"

# Binding a str holding lone surrogates raises UnicodeEncodeError, a ValueError.
_DB_ERRORS = (aiosqlite.Error, ValueError)


class SQLiteSecretStore(SecretStore):
    """Persistent store backed by a single SQLite file.

    ``replace`` runs its delete and insert in one transaction, so readers
    never observe the address empty mid-replace and a failed insert keeps
    the previous item.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "device_auth.db") -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            db = await self._open()
            try:
                await db.execute(_CREATE_TABLE)
                await db.execute(_CREATE_LABEL_INDEX)
                await db.commit()
            except _DB_ERRORS as exc:
                await db.close()
                raise SecretStoreError("connect", str(exc)) from exc
            self._db = db
        return self._db

    async def _open(self) -> aiosqlite.Connection:
        try:
            return await aiosqlite.connect(self._db_path)
        except _DB_ERRORS as exc:
            raise SecretStoreError("connect", str(exc)) from exc

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

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
        db = await self._connect()
        try:
            await db.execute(_INSERT, (service, address, label, accessibility.value, payload))
            await db.commit()
        except aiosqlite.IntegrityError as exc:
            await db.rollback()
            raise DuplicateItemError(address) from exc
        except _DB_ERRORS as exc:
            await db.rollback()
            raise SecretStoreError("put", str(exc)) from exc

    async def replace(
        self,
        service: str,
        address: str,
        *,
        label: str,
        payload: bytes,
        accessibility: Accessibility,
    ) -> None:
        db = await self._connect()
        try:
            await db.execute(_DELETE, (service, address))
            await db.execute(_INSERT, (service, address, label, accessibility.value, payload))
            await db.commit()
        except _DB_ERRORS as exc:
            await db.rollback()
            raise SecretStoreError("replace", str(exc)) from exc

    async def delete(self, service: str, address: str) -> bool:
        db = await self._connect()
        try:
            cursor = await db.execute(_DELETE, (service, address))
            await db.commit()
        except _DB_ERRORS as exc:
            await db.rollback()
            raise SecretStoreError("delete", str(exc)) from exc
        return cursor.rowcount > 0

    async def delete_by_label(self, service: str, label: str) -> int:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "DELETE FROM secret_items WHERE service = ? AND label = ?",
                (service, label),
            )
            await db.commit()
        except _DB_ERRORS as exc:
            await db.rollback()
            raise SecretStoreError("delete_by_label", str(exc)) from exc
        return cursor.rowcount

    async def find_one(self, service: str, address: str) -> bytes | None:
        row = await self._fetch_one(
            "find_one",
            "SELECT payload FROM secret_items WHERE service = ? AND address = ?",
            (service, address),
        )
        if row is None:
            return None
        return bytes(row[0])

    async def accessibility_of(self, service: str, address: str) -> Accessibility | None:
        """Return the access policy recorded for *address*, if any."""
        row = await self._fetch_one(
            "accessibility_of",
            "SELECT accessibility FROM secret_items WHERE service = ? AND address = ?",
            (service, address),
        )
        return Accessibility(row[0]) if row else None

    async def _fetch_one(self, operation: str, sql: str, params: tuple[str, ...]) -> Any:
        db = await self._connect()
        try:
            cursor = await db.execute(sql, params)
            return await cursor.fetchone()
        except _DB_ERRORS as exc:
            raise SecretStoreError(operation, str(exc)) from exc
