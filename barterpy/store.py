"""Module defining the credential store interface and implementations."""
from __future__ import annotations

import logging
from typing import Protocol

import keyring
from keyring.errors import PasswordDeleteError

from .config import settings
from .utils import add_async_job

_LOGGER = logging.getLogger(__name__)

# keyring stores one secret per (service, username); the store key is the username
KEYRING_DEFAULT_SERVICE = "barter"


class TokenStore(Protocol):
    """Protocol for secure key-value credential stores."""

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None."""
        ...

    async def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...

    async def delete_item(self, key: str) -> None:
        """Delete ``key``; deleting a missing key is a no-op."""
        ...


class KeyringTokenStore:
    """TokenStore backed by the operating system keychain via ``keyring``."""

    def __init__(self, service: str | None = None) -> None:
        self._service = service or settings.KEYRING_SERVICE or KEYRING_DEFAULT_SERVICE

    @property
    def service(self) -> str:
        """Return the keyring service name."""
        return self._service

    async def get_item(self, key: str) -> str | None:
        return await add_async_job(keyring.get_password, self._service, key)

    async def set_item(self, key: str, value: str) -> None:
        await add_async_job(keyring.set_password, self._service, key, value)

    async def delete_item(self, key: str) -> None:
        try:
            await add_async_job(keyring.delete_password, self._service, key)
        except PasswordDeleteError:
            _LOGGER.debug("Nothing stored under %s/%s", self._service, key)


class MemoryTokenStore:
    """TokenStore that keeps values in process memory."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    @property
    def items(self) -> dict[str, str]:
        """Return a copy of the stored values."""
        return dict(self._items)

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def delete_item(self, key: str) -> None:
        self._items.pop(key, None)
