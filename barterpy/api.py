"""Module that implements the BarterApi class."""

from __future__ import annotations

import asyncio
import json
import logging
from http import HTTPStatus
from typing import Any, TypeVar
from urllib.parse import quote, urlencode

import aiohttp
from pydantic import BaseModel, ValidationError

from .config import settings
from .const import (
    ACCESS_TOKEN_KEY,
    AUTH_LOGIN,
    AUTH_LOGOUT,
    AUTH_ME,
    AUTH_REFRESH,
    AUTH_REGISTER,
    CONTENT_TYPE_JSON,
    DEFAULT_ERROR_MESSAGE,
    REFRESH_TOKEN_KEY,
    SwipeDirection,
    TokenAttribute,
    TradeStatus,
    UNEXPECTED_SHAPE_MESSAGE,
)
from .exceptions import RequestError, SessionExpiredError
from .models import (
    AuthResponse,
    AuthTokens,
    ConversationData,
    ListingData,
    OfferData,
    UserData,
    UserListingData,
)
from .store import KeyringTokenStore, TokenStore
from .utils import add_async_job, drop_none

_LOGGER = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


def _is_ok(status: int) -> bool:
    return 200 <= status < 300


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _loads_quietly(text: str) -> Any:
    """Decode an error body, returning None when it is not JSON."""
    try:
        return json.loads(text) if text else None
    except ValueError:
        return None


def _error_message(payload: Any) -> str:
    message = payload.get("message") if isinstance(payload, dict) else None
    if isinstance(message, list):
        # validation errors may arrive as a list of messages
        message = "; ".join(str(item) for item in message)
    return str(message) if message else DEFAULT_ERROR_MESSAGE


def _as_list(payload: Any) -> list:
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    raise RequestError(UNEXPECTED_SHAPE_MESSAGE, body=payload)


def _parse(model: type[TModel], payload: Any) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as err:
        raise RequestError(UNEXPECTED_SHAPE_MESSAGE, body=payload) from err


class BarterApi:
    """Class to communicate with the Barter API.

    Requests carry the stored bearer token. A 401 triggers one refresh of the
    token pair followed by one retry of the original request.
    """

    def __init__(
        self,
        store: TokenStore | None = None,
        base_url: str | None = None,
        client_session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the API client."""
        self.__store: TokenStore = store if store is not None else KeyringTokenStore()
        self.__base_url = (base_url or settings.api_base_url).rstrip("/")
        self.__client_session = client_session
        self.__has_custom_client_session = client_session is not None
        self.__access_token: str | None = None
        self.__refresh_task: asyncio.Future | None = None

    @property
    def base_url(self) -> str:
        """Return the API base URL."""
        return self.__base_url

    @property
    def store(self) -> TokenStore:
        """Return the credential store."""
        return self.__store

    def is_authenticated(self) -> bool:
        """Return True if an access token is held in memory.

        This does not check the token with the server.
        """
        return bool(self.__access_token)

    async def init(self) -> None:
        """Load the persisted access token."""
        self.__access_token = await self.__store.get_item(ACCESS_TOKEN_KEY)
        _LOGGER.debug(
            "Loaded credentials from store: %s",
            "token found" if self.__access_token else "no token",
        )

    async def set_tokens(self, access_token: str, refresh_token: str) -> None:
        """Replace the access token and persist the token pair."""
        await self.__store.set_item(ACCESS_TOKEN_KEY, access_token)
        await self.__store.set_item(REFRESH_TOKEN_KEY, refresh_token)
        self.__access_token = access_token

    async def clear_tokens(self) -> None:
        """Forget the access token and delete both stored tokens."""
        self.__access_token = None
        await self.__store.delete_item(ACCESS_TOKEN_KEY)
        await self.__store.delete_item(REFRESH_TOKEN_KEY)

    async def get_refresh_token(self) -> str | None:
        """Return the stored refresh token."""
        return await self.__store.get_item(REFRESH_TOKEN_KEY)

    async def disconnect(self) -> None:
        """Close the client session if it was created by this client."""
        if (
            not self.__has_custom_client_session
            and self.__client_session is not None
            and not self.__client_session.closed
        ):
            await self.__client_session.close()
        self.__client_session = None

    async def request(
        self,
        method: str,
        endpoint: str,
        body: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request to ``endpoint`` and return the decoded JSON body."""
        url = f"{self.__base_url}{endpoint}"
        request_headers = {"Content-Type": CONTENT_TYPE_JSON, **(headers or {})}
        token = self.__access_token
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        status, text = await self.__fetch(method, url, request_headers, body)

        refresh_failed = False
        if status == HTTPStatus.UNAUTHORIZED and token:
            if self.__access_token and self.__access_token != token:
                # another request already rotated the token
                refreshed = True
            else:
                refreshed = await self.__refresh_access_token()
            if refreshed:
                request_headers["Authorization"] = f"Bearer {self.__access_token}"
                status, text = await self.__fetch(method, url, request_headers, body)
                if not _is_ok(status):
                    raise RequestError(text, status=status, body=text)
                return self.__decode(status, text)
            refresh_failed = True

        if not _is_ok(status):
            payload = _loads_quietly(text)
            error = SessionExpiredError if refresh_failed else RequestError
            raise error(
                _error_message(payload),
                status=status,
                body=payload if payload is not None else text,
            )

        return self.__decode(status, text)

    async def get(self, endpoint: str) -> Any:
        """Send a GET request."""
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, data: Any = None) -> Any:
        """Send a POST request with an optional JSON body."""
        return await self.request(
            "POST", endpoint, body=json.dumps(data) if data is not None else None
        )

    async def put(self, endpoint: str, data: Any = None) -> Any:
        """Send a PUT request with an optional JSON body."""
        return await self.request(
            "PUT", endpoint, body=json.dumps(data) if data is not None else None
        )

    async def delete(self, endpoint: str) -> Any:
        """Send a DELETE request."""
        return await self.request("DELETE", endpoint)

    # auth

    async def register(
        self, email: str, username: str, password: str, display_name: str
    ) -> AuthResponse:
        """Create an account and store the issued tokens."""
        data = await self.post(
            AUTH_REGISTER,
            {
                "email": email,
                "username": username,
                "password": password,
                "displayName": display_name,
            },
        )
        return await self.__store_auth_response(data)

    async def login(self, email: str, password: str) -> AuthResponse:
        """Log in and store the issued tokens."""
        data = await self.post(AUTH_LOGIN, {"email": email, "password": password})
        return await self.__store_auth_response(data)

    async def logout(self) -> None:
        """Log out on the server and clear local credentials."""
        try:
            if self.is_authenticated():
                refresh_token = await self.get_refresh_token()
                await self.post(AUTH_LOGOUT, {TokenAttribute.REFRESH_TOKEN: refresh_token})
        except (RequestError, aiohttp.ClientError, asyncio.TimeoutError) as err:
            _LOGGER.warning("Server logout failed: %s", err)
        finally:
            await self.clear_tokens()

    async def get_me(self) -> UserData:
        """Return the signed-in user."""
        return _parse(UserData, await self.get(AUTH_ME))

    # users

    async def get_user(self, user_id: str) -> UserData:
        return _parse(UserData, await self.get(f"/users/{_segment(user_id)}"))

    async def get_user_by_username(self, username: str) -> UserData:
        return _parse(
            UserData,
            await self.get(f"/users/username/{_segment(username)}"),
        )

    async def update_profile(self, **fields: Any) -> UserData:
        """Update the signed-in user's profile with camelCase ``fields``."""
        return _parse(UserData, await self.put("/users/profile", drop_none(fields)))

    async def get_my_stats(self) -> dict:
        return await self.get("/users/me/stats")

    # listings

    async def get_listings(
        self,
        category: str | None = None,
        min_value: float | None = None,
        max_value: float | None = None,
        distance: str | None = None,
        **params: Any,
    ) -> list[ListingData]:
        """Return listings matching the given filters."""
        query = drop_none(
            {
                "category": category,
                "minValue": min_value,
                "maxValue": max_value,
                "distance": distance,
                **params,
            }
        )
        endpoint = f"/listings?{urlencode(query)}" if query else "/listings"
        return self.__validate_list(ListingData, await self.get(endpoint))

    async def get_listing(self, listing_id: str) -> ListingData:
        return _parse(ListingData, await self.get(f"/listings/{_segment(listing_id)}"))

    async def create_listing(self, data: dict) -> ListingData:
        return _parse(ListingData, await self.post("/listings", data))

    async def update_listing(self, listing_id: str, data: dict) -> ListingData:
        return _parse(
            ListingData,
            await self.put(f"/listings/{_segment(listing_id)}", data),
        )

    async def delete_listing(self, listing_id: str) -> None:
        await self.delete(f"/listings/{_segment(listing_id)}")

    async def get_my_listings(self) -> list[UserListingData]:
        return self.__validate_list(UserListingData, await self.get("/listings/user/me"))

    async def get_user_listings(self, user_id: str) -> list[ListingData]:
        return self.__validate_list(
            ListingData, await self.get(f"/listings/user/{_segment(user_id)}")
        )

    async def get_discovery_feed(self) -> list[ListingData]:
        return self.__validate_list(ListingData, await self.get("/listings/discover/feed"))

    async def swipe(self, listing_id: str, direction: SwipeDirection | str) -> Any:
        """Record a swipe on a discovery card."""
        return await self.post(
            f"/listings/swipe/{_segment(listing_id)}",
            {"direction": SwipeDirection(direction).value},
        )

    # offers

    async def get_offers(self) -> list[OfferData]:
        return self.__validate_list(OfferData, await self.get("/offers"))

    async def create_offer(
        self,
        listing_id: str,
        offered_item_id: str | None = None,
        cash_amount: float | None = None,
        message: str | None = None,
    ) -> OfferData:
        """Make an offer on a listing with an item, cash or both."""
        data = drop_none(
            {
                "listingId": listing_id,
                "offeredItemId": offered_item_id,
                "cashAmount": cash_amount,
                "message": message,
            }
        )
        return _parse(OfferData, await self.post("/offers", data))

    async def get_offer(self, offer_id: str) -> OfferData:
        return _parse(OfferData, await self.get(f"/offers/{_segment(offer_id)}"))

    async def get_sent_offers(self) -> list[OfferData]:
        return self.__validate_list(OfferData, await self.get("/offers/sent"))

    async def get_received_offers(self) -> list[OfferData]:
        return self.__validate_list(OfferData, await self.get("/offers/received"))

    async def accept_offer(self, offer_id: str) -> OfferData:
        return await self.__offer_action(offer_id, "accept")

    async def reject_offer(self, offer_id: str) -> OfferData:
        return await self.__offer_action(offer_id, "reject")

    async def counter_offer(
        self,
        offer_id: str,
        offered_item_id: str | None = None,
        cash_amount: float | None = None,
        message: str | None = None,
    ) -> OfferData:
        data = drop_none(
            {"offeredItemId": offered_item_id, "cashAmount": cash_amount, "message": message}
        )
        return await self.__offer_action(offer_id, "counter", data)

    async def cancel_offer(self, offer_id: str) -> OfferData:
        return await self.__offer_action(offer_id, "cancel")

    # ai

    async def get_cash_suggestion(self, listing_id: str) -> dict:
        """Return the server's cash suggestion for a listing."""
        return await self.get(f"/ai/suggest/{_segment(listing_id)}")

    async def can_trade(self, listing_id: str) -> dict:
        return await self.post("/ai/can-trade", {"listingId": listing_id})

    async def get_my_tradeable_items(self) -> list[UserListingData]:
        return self.__validate_list(UserListingData, await self.get("/ai/my-items"))

    # messages

    async def get_conversations(self) -> list[ConversationData]:
        return self.__validate_list(ConversationData, await self.get("/messages/conversations"))

    async def get_conversation(self, conversation_id: str) -> dict:
        """Return a conversation with its messages."""
        return await self.get(f"/messages/conversations/{_segment(conversation_id)}")

    async def send_message(self, conversation_id: str, content: str) -> dict:
        return await self.post(
            f"/messages/conversations/{_segment(conversation_id)}", {"content": content}
        )

    async def get_conversation_by_offer(self, offer_id: str) -> dict:
        return await self.get(f"/messages/offer/{_segment(offer_id)}")

    async def mark_read(self, conversation_id: str) -> None:
        await self.put(f"/messages/conversations/{_segment(conversation_id)}/read")

    # trades

    async def get_trades(self) -> list[dict]:
        return _as_list(await self.get("/trades"))

    async def get_trade(self, trade_id: str) -> dict:
        return await self.get(f"/trades/{_segment(trade_id)}")

    async def update_trade_status(self, trade_id: str, status: TradeStatus | str) -> dict:
        return await self.put(
            f"/trades/{_segment(trade_id)}/status", {"status": TradeStatus(status).value}
        )

    async def create_review(
        self, trade_id: str, rating: int, comment: str | None = None
    ) -> dict:
        """Review the other party of a completed trade."""
        if not 1 <= rating <= 5:
            raise ValueError(f"Rating must be between 1 and 5, got {rating}")
        return await self.post(
            f"/trades/{_segment(trade_id)}/review",
            drop_none({"rating": rating, "comment": comment}),
        )

    async def get_user_reviews(self, user_id: str) -> list[dict]:
        return _as_list(await self.get(f"/trades/reviews/{_segment(user_id)}"))

    # internals

    def __get_client_session(self) -> aiohttp.ClientSession:
        if self.__client_session is None or self.__client_session.closed:
            self.__client_session = aiohttp.ClientSession()
        return self.__client_session

    async def __fetch(
        self, method: str, url: str, headers: dict[str, str], data: str | None
    ) -> tuple[int, str]:
        """Send one HTTP request and return its status and body text."""
        _LOGGER.debug("%s %s", method, url)
        session = self.__get_client_session()
        async with session.request(method, url, headers=headers, data=data) as response:
            return response.status, await response.text(errors="replace")

    @staticmethod
    def __decode(status: int, text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError as err:
            raise RequestError("Invalid JSON in response", status=status, body=text) from err

    async def __refresh_access_token(self) -> bool:
        """Refresh the token pair, sharing one refresh between concurrent callers."""
        if self.__refresh_task is None or self.__refresh_task.done():
            self.__refresh_task = add_async_job(self.__run_refresh())
        return await asyncio.shield(self.__refresh_task)

    async def __run_refresh(self) -> bool:
        try:
            refresh_token = await self.get_refresh_token()
            if not refresh_token:
                return False

            _LOGGER.debug("Refreshing access token")
            status, text = await self.__fetch(
                "POST",
                f"{self.__base_url}{AUTH_REFRESH}",
                {"Content-Type": CONTENT_TYPE_JSON},
                json.dumps({TokenAttribute.REFRESH_TOKEN: refresh_token}),
            )
            if not _is_ok(status):
                _LOGGER.info("Refresh token rejected (status %s); clearing credentials", status)
                await self.clear_tokens()
                return False

            tokens = AuthTokens.model_validate_json(text)
            await self.set_tokens(tokens.access_token, tokens.refresh_token)
            _LOGGER.debug("Access token refreshed")
            return True
        except Exception as err:  # noqa: BLE001 - any failure invalidates the session
            _LOGGER.warning("Token refresh failed: %s", err)
            await self.clear_tokens()
            return False

    async def __store_auth_response(self, data: Any) -> AuthResponse:
        auth = _parse(AuthResponse, data)
        await self.set_tokens(auth.access_token, auth.refresh_token)
        return auth

    async def __offer_action(self, offer_id: str, action: str, data: dict | None = None) -> OfferData:
        return _parse(
            OfferData,
            await self.post(f"/offers/{_segment(offer_id)}/{action}", data),
        )

    @staticmethod
    def __validate_list(model: type[TModel], payload: Any) -> list[TModel]:
        return [_parse(model, item) for item in _as_list(payload)]
