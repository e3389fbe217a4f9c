"""Tests for the credential stores."""

from __future__ import annotations

import keyring
import pytest
from keyring.errors import PasswordDeleteError

from barterpy.store import KeyringTokenStore, MemoryTokenStore


class _FakeKeyring:
    def __init__(self) -> None:
        self.values: dict[tuple[str, str], str] = {}

    def get_password(self, service, username):
        return self.values.get((service, username))

    def set_password(self, service, username, password):
        self.values[(service, username)] = password

    def delete_password(self, service, username):
        if (service, username) not in self.values:
            raise PasswordDeleteError("not found")
        del self.values[(service, username)]


@pytest.fixture()
def fake_keyring(monkeypatch) -> _FakeKeyring:
    fake = _FakeKeyring()
    monkeypatch.setattr(keyring, "get_password", fake.get_password)
    monkeypatch.setattr(keyring, "set_password", fake.set_password)
    monkeypatch.setattr(keyring, "delete_password", fake.delete_password)
    return fake


@pytest.mark.asyncio
async def test_memory_store_round_trip():
    store = MemoryTokenStore({"a": "1"})
    assert await store.get_item("a") == "1"
    await store.set_item("b", "2")
    await store.delete_item("a")
    await store.delete_item("missing")
    assert store.items == {"b": "2"}


@pytest.mark.asyncio
async def test_keyring_store_uses_service_name(fake_keyring):
    store = KeyringTokenStore(service="barter-test")
    assert store.service == "barter-test"

    await store.set_item("barter_access_token", "T")
    assert fake_keyring.values == {("barter-test", "barter_access_token"): "T"}
    assert await store.get_item("barter_access_token") == "T"
    assert await store.get_item("barter_refresh_token") is None


@pytest.mark.asyncio
async def test_keyring_store_delete_missing_is_noop(fake_keyring):
    store = KeyringTokenStore(service="barter-test")
    await store.delete_item("barter_refresh_token")
    await store.set_item("barter_refresh_token", "R")
    await store.delete_item("barter_refresh_token")
    assert fake_keyring.values == {}


def test_keyring_store_defaults_to_configured_service():
    assert KeyringTokenStore().service == "barter"
