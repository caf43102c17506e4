"""Shared fixtures and utilities for voice_client tests.

This module provides:
- A request recorder usable as an httpx.MockTransport handler
- A factory building gateways wired to that recorder
- A session store and reload spy for session-expiry tests
"""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from voice_client.client import MemorySessionStore, RequestGateway
from voice_client.config import GatewayConfig
from voice_client.models import UserClient, UserIdentity

ORIGIN = "https://voice.example.org"
API_ROOT = f"{ORIGIN}/api/v1"
USER_ID = "client-1234"


class RequestRecorder:
    """MockTransport handler that records requests and replays canned responses.

    Responses queued with ``reply`` are served in order; once the queue is
    empty every request gets an empty JSON object.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._queue: list[httpx.Response | Exception] = []

    def reply(self, response: httpx.Response | Exception) -> "RequestRecorder":
        self._queue.append(response)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._queue.pop(0) if self._queue else httpx.Response(200, json={})
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


class ReloadSpy:
    """Stand-in for the page reload triggered on session expiry."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def recorder() -> RequestRecorder:
    return RequestRecorder()


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore({"userdata": {"userId": USER_ID}})


@pytest.fixture
def reload_spy() -> ReloadSpy:
    return ReloadSpy()


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(origin=ORIGIN)


@pytest.fixture
def make_gateway(
    recorder: RequestRecorder,
    session_store: MemorySessionStore,
    reload_spy: ReloadSpy,
    config: GatewayConfig,
) -> Callable[..., RequestGateway]:
    """Factory for gateways whose transport is the shared recorder."""

    def _make(
        locale: str | None = "fr",
        *,
        signed_in: bool = False,
        **kwargs: Any,
    ) -> RequestGateway:
        user = UserIdentity(
            user_id=USER_ID,
            account=UserClient(email="reader@example.org") if signed_in else None,
        )
        transport = httpx.AsyncClient(
            base_url=ORIGIN, transport=httpx.MockTransport(recorder)
        )
        kwargs.setdefault("config", config)
        kwargs.setdefault("session_store", session_store)
        kwargs.setdefault("on_session_expired", reload_spy)
        return RequestGateway(locale, user, transport=transport, **kwargs)

    return _make
