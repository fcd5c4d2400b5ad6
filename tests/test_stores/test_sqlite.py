"""Tests for SQLiteSecretStore."""

import pytest

from device_auth.exceptions import DuplicateItemError, SecretStoreError
from device_auth.stores import Accessibility, SQLiteSecretStore

POLICY = Accessibility.WHEN_UNLOCKED_THIS_DEVICE_ONLY


@pytest.fixture
async def store():
    s = SQLiteSecretStore(":memory:")
    yield s
    await s.close()


async def put(store, address, label="dev", payload=b"x", service="svc"):
    await store.put(service, address, label=label, payload=payload, accessibility=POLICY)


async def test_find_nonexistent(store):
    assert await store.find_one("svc", "nope") is None


async def test_put_and_find_binary(store):
    await put(store, "dev.admin", payload=b"\x00\xffbinary")
    assert await store.find_one("svc", "dev.admin") == b"\x00\xffbinary"


async def test_put_occupied_raises(store):
    await put(store, "dev.admin")
    with pytest.raises(DuplicateItemError):
        await put(store, "dev.admin")


async def test_replace_is_upsert(store):
    await put(store, "dev.admin", payload=b"a")
    await store.replace(
        "svc",
        "dev.admin",
        label="dev",
        payload=b"b",
        accessibility=Accessibility.AFTER_FIRST_UNLOCK,
    )
    assert await store.find_one("svc", "dev.admin") == b"b"
    assert await store.accessibility_of("svc", "dev.admin") is Accessibility.AFTER_FIRST_UNLOCK


async def test_delete(store):
    await put(store, "dev.admin")
    assert await store.delete("svc", "dev.admin") is True
    assert await store.delete("svc", "dev.admin") is False


async def test_delete_by_label(store):
    await put(store, "dev.a")
    await put(store, "dev.b")
    await put(store, "other.a", label="other")
    await put(store, "dev.a", service="elsewhere")

    assert await store.delete_by_label("svc", "dev") == 2
    assert await store.find_one("svc", "other.a") == b"x"
    assert await store.find_one("elsewhere", "dev.a") == b"x"


async def test_records_policy(store):
    await put(store, "dev.admin")
    assert await store.accessibility_of("svc", "dev.admin") is POLICY
    assert await store.accessibility_of("svc", "missing") is None


async def test_persists_across_connections(tmp_path):
    path = str(tmp_path / "secrets.db")
    first = SQLiteSecretStore(path)
    await put(first, "dev.admin", payload=b"kept")
    await first.close()

    second = SQLiteSecretStore(path)
    try:
        assert await second.find_one("svc", "dev.admin") == b"kept"
    finally:
        await second.close()


async def test_unopenable_path_raises_store_error(tmp_path):
    store = SQLiteSecretStore(str(tmp_path / "missing-dir" / "secrets.db"))
    with pytest.raises(SecretStoreError):
        await store.find_one("svc", "dev.admin")


async def test_unencodable_text_raises_store_error(store):
    with pytest.raises(SecretStoreError):
        await store.find_one("svc", "dev-\ud800.admin")
    with pytest.raises(SecretStoreError):
        await put(store, "dev-\ud800.admin", label="dev-\ud800")
    with pytest.raises(SecretStoreError):
        await store.delete("svc", "dev-\ud800.admin")
    with pytest.raises(SecretStoreError):
        await store.delete_by_label("svc", "dev-\ud800")
    with pytest.raises(SecretStoreError):
        await store.accessibility_of("svc", "dev-\ud800.admin")


async def test_store_usable_after_bad_statement(store):
    with pytest.raises(SecretStoreError):
        await store.delete("svc", "dev-\ud800.admin")
    await put(store, "dev.admin", payload=b"ok")
    assert await store.find_one("svc", "dev.admin") == b"ok"


async def test_schema_failure_does_not_stick(tmp_path):
    path = tmp_path / "secrets.db"
    path.write_bytes(b"this is not a sqlite database file at all" * 4)
    store = SQLiteSecretStore(str(path))
    with pytest.raises(SecretStoreError):
        await store.find_one("svc", "dev.admin")
    assert store._db is None

    path.unlink()
    try:
        await put(store, "dev.admin", payload=b"fresh")
        assert await store.find_one("svc", "dev.admin") == b"fresh"
    finally:
        await store.close()
