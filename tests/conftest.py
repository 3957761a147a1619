"""Shared pytest fixtures for the editorial_reviews test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from editorial_reviews.providers.store.memory_store import MemoryKeyValueStore

# Scanners stop when fewer than 50 characters remain, so fixture pages end
# with a footer long enough to keep the last real element reachable.
FOOTER = "<footer>" + ("&nbsp;" * 40) + "</footer>"

Route = str | tuple[int, str] | Exception


def page(body: str) -> str:
    """Wrap *body* in a minimal HTML document with a padded footer."""
    return f"<html><head><title>t</title></head><body>{body}{FOOTER}</body></html>"


def make_response(status_code: int = 200, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


def make_http_client(routes: dict[str, Route]) -> MagicMock:
    """Build a mock ``httpx.AsyncClient`` whose ``get`` serves *routes* by exact URL.

    A route value is the 200 body, a ``(status, body)`` pair, or an
    exception to raise.  Unknown URLs answer 404.
    """

    async def _get(url: str, **kwargs: Any) -> MagicMock:
        route = routes.get(url)
        if route is None:
            return make_response(404, "")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            return make_response(*route)
        return make_response(200, route)

    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(side_effect=_get)
    return client


def requested_urls(client: MagicMock) -> list[str]:
    return [call.args[0] for call in client.get.await_args_list]


@pytest.fixture
def http_client_factory() -> Callable[[dict[str, Route]], MagicMock]:
    return make_http_client


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()
