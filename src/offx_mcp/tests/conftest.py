"""Shared fixtures: settings, a recording fake of the OFF-X API, client, registry, dispatcher."""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import orjson
import pytest

from offx_mcp.ext.mcp import Dispatcher
from offx_mcp.foundation.config import OffxSettings, clear_settings_cache
from offx_mcp.foundation.registry import ToolRegistry
from offx_mcp.io import OffxClient
from offx_mcp.runtime.logging import configure_logging
from offx_mcp.tools import create_registry

TEST_TOKEN = "test-token"
TEST_BASE_URL = "https://offx.test/api"


class FakeOffx:
    """Records every upstream request and answers with one canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.body: object = {"ok": True}
        self.raw: bytes | None = None
        self.error: Exception | None = None

    def respond(self, status: int = 200, body: object = None, *, raw: bytes | None = None) -> None:
        self.status, self.body, self.raw = status, body, raw

    def fail_with(self, error: Exception) -> None:
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        content = self.raw if self.raw is not None else orjson.dumps(self.body)
        return httpx.Response(self.status, content=content, headers={"Content-Type": "application/json"})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def path(self) -> str:
        """Request path relative to the API base (e.g. `/drug/search/param`)."""
        return self.last.url.path.removeprefix("/api")

    @property
    def query(self) -> list[tuple[str, str]]:
        """Ordered query pairs of the last request."""
        return list(self.last.url.params.multi_items())


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    """Silence log output and reset cached settings around each test."""
    configure_logging("none")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> OffxSettings:
    return OffxSettings(_env_file=None, OFFX_API_TOKEN=TEST_TOKEN, OFFX_API_BASE_URL=TEST_BASE_URL, OFFX_HTTP_TIMEOUT=5.0)


@pytest.fixture
def upstream() -> FakeOffx:
    return FakeOffx()


@pytest.fixture
def client(settings: OffxSettings, upstream: FakeOffx) -> OffxClient:
    return OffxClient(settings, transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def registry(client: OffxClient) -> ToolRegistry:
    return create_registry(client)


@pytest.fixture
def dispatcher(registry: ToolRegistry) -> Dispatcher:
    return Dispatcher(registry)
