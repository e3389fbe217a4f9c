"""Module that implements the Account class."""

from __future__ import annotations

import logging

import aiohttp

from .api import BarterApi
from .exceptions import InvalidInputError, RequestError, SessionExpiredError
from .models import UserData
from .store import TokenStore
from .validation import validate_registration_form

_LOGGER = logging.getLogger(__name__)


class Account:
    """Class for a signed-in Barter user using asyncio."""

    def __init__(
        self,
        api: BarterApi | None = None,
        store: TokenStore | None = None,
        client_session: aiohttp.ClientSession | None = None,
    ):
        """Initialize an account.

        Either pass a ready ``api`` or let the account build one from ``store``
        and ``client_session``.
        """
        self._api = api if api is not None else BarterApi(store=store, client_session=client_session)
        self._user: UserData | None = None

    @property
    def api(self) -> BarterApi:
        """Return the API."""
        return self._api

    @property
    def user(self) -> UserData | None:
        """Return the signed-in user."""
        return self._user

    @property
    def is_authenticated(self) -> bool:
        """Return True if a user is loaded and the API holds a token."""
        return self._user is not None and self.api.is_authenticated()

    async def connect(self) -> UserData | None:
        """Restore a stored session and load the user if there is one."""
        _LOGGER.debug("Restoring Barter session")
        await self.api.init()
        if not self.api.is_authenticated():
            return None
        try:
            self._user = await self.api.get_me()
        except RequestError as err:
            _LOGGER.info("Stored session could not be restored: %s", err)
            self._user = None
        return self._user

    async def disconnect(self) -> None:
        """Disconnect from the API."""
        await self.api.disconnect()

    async def login(self, email: str, password: str) -> UserData:
        """Log in with email and password."""
        auth = await self.api.login(email, password)
        self._user = auth.user or await self.api.get_me()
        _LOGGER.info("Logged in as %s", self._user.username)
        return self._user

    async def register(
        self, email: str, username: str, password: str, display_name: str
    ) -> UserData:
        """Validate the registration form and create an account."""
        is_valid, errors = validate_registration_form(
            display_name=display_name, username=username, email=email, password=password
        )
        if not is_valid:
            raise InvalidInputError(errors)
        auth = await self.api.register(email, username, password, display_name)
        self._user = auth.user or await self.api.get_me()
        _LOGGER.info("Registered %s", self._user.username)
        return self._user

    async def logout(self) -> None:
        """Log out and forget the user."""
        await self.api.logout()
        self._user = None

    async def refresh_user(self) -> UserData | None:
        """Reload the signed-in user."""
        if not self.api.is_authenticated():
            self._user = None
            return None
        try:
            self._user = await self.api.get_me()
        except SessionExpiredError:
            self._user = None
            raise
        return self._user
