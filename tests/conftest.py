"""Shared test fixtures."""

from datetime import UTC, datetime

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from device_auth import DeviceAuthStore
from device_auth.stores import InMemorySecretStore


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self._now = start

    def now(self) -> datetime:
        return datetime.fromtimestamp(self._now, tz=UTC)

    def advance(self, seconds: float) -> None:
        self._now += seconds


class MemoryKeyring(KeyringBackend):
    """Process-local keyring backend so tests never touch the real vault."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise PasswordDeleteError("not found") from None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def secrets():
    return InMemorySecretStore()


@pytest.fixture
def auth_store(secrets, clock):
    return DeviceAuthStore(secrets, service="test-service", clock=clock)


@pytest.fixture
def memory_keyring():
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)
