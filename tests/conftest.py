"""Shared fixtures for the barterpy test suite.

``ensure_client_sessions_closed`` records every aiohttp ClientSession created
during a test and closes the ones still open at teardown, so clients that
build their own session do not leak ResourceWarnings.

``FakeSession`` stands in for a ClientSession: it replays scripted responses
and records each request it receives.
"""
from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from typing import Any, List

import aiohttp
import pytest
import pytest_asyncio

from barterpy.api import BarterApi
from barterpy.store import MemoryTokenStore

BASE_URL = "https://api.test/api/v1"


class _TrackingClientSession(aiohttp.ClientSession):
    """Subclass of ClientSession that registers every created instance."""

    _sessions: List[aiohttp.ClientSession] = []

    def __init__(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        super().__init__(*args, **kwargs)
        self.__class__._sessions.append(self)


@pytest_asyncio.fixture(autouse=True)
async def ensure_client_sessions_closed(monkeypatch):  # type: ignore[missing-type-doc]
    """Close any ClientSession left open by the test."""
    monkeypatch.setattr(aiohttp, "ClientSession", _TrackingClientSession)
    yield
    close_tasks = [sess.close() for sess in list(_TrackingClientSession._sessions) if not sess.closed]
    if close_tasks:
        await asyncio.gather(*close_tasks, return_exceptions=True)
    _TrackingClientSession._sessions.clear()


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(
        self,
        status: int = 200,
        json_data: Any = None,
        text_data: str | None = None,
        raw: bytes | None = None,
    ) -> None:
        self.status = status
        if raw is None:
            if text_data is None:
                text_data = json.dumps(json_data) if json_data is not None else ""
            raw = text_data.encode()
        self._raw = raw

    async def text(self, encoding: str | None = None, errors: str = "strict") -> str:
        return self._raw.decode(encoding or "utf-8", errors)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Replays scripted responses and records requests."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[SimpleNamespace] = []
        self.closed = False

    def request(self, method, url, headers=None, data=None):  # noqa: D401 - mirrors aiohttp
        self.calls.append(
            SimpleNamespace(
                method=method,
                url=url,
                headers=dict(headers or {}),
                body=json.loads(data) if data else None,
            )
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture()
def make_api(store):
    """Return a factory building a BarterApi over a FakeSession."""

    def _make(*responses: FakeResponse | Exception, token: str | None = None) -> tuple[BarterApi, FakeSession]:
        session = FakeSession(*responses)
        api = BarterApi(store=store, base_url=BASE_URL, client_session=session)  # type: ignore[arg-type]
        if token:
            api._BarterApi__access_token = token  # type: ignore[attr-defined]
        return api, session

    return _make
