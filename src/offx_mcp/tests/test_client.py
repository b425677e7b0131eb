"""Tests for OffxClient: authentication, decoding and failure mapping."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import httpx
import orjson
import pytest

from offx_mcp.foundation.errors import ErrorCode, UpstreamError
from offx_mcp.io import OffxClient, UpstreamRequest
from offx_mcp.runtime.logging import configure_logging

if TYPE_CHECKING:
    from conftest import FakeOffx

    from offx_mcp.foundation.config import OffxSettings

REQUEST = UpstreamRequest("/drug/search/param", [("drug", "everolimus")])


class TestUpstreamRequest:
    def test_params_frozen_to_tuple(self) -> None:
        req = UpstreamRequest("/x", [("a", "1"), ("b", "2")])
        assert req.params == (("a", "1"), ("b", "2"))
        assert req.query == {"a": "1", "b": "2"}


class TestOffxClient:
    """Single GET per call; no retries."""

    @pytest.mark.asyncio
    async def test_token_appended_last(self, client: OffxClient, upstream: FakeOffx) -> None:
        upstream.respond(body={"drugs": []})
        assert await client.get("search_drugs", REQUEST) == {"drugs": []}
        assert upstream.query == [("drug", "everolimus"), ("token", "test-token")]
        assert upstream.last.method == "GET"
        assert upstream.last.url.host == "offx.test"
        assert upstream.last.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_non_json_object_bodies_pass_through(self, client: OffxClient, upstream: FakeOffx) -> None:
        upstream.respond(body=[1, 2, 3])
        assert await client.get("search_drugs", REQUEST) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_error_status_keeps_body(self, client: OffxClient, upstream: FakeOffx) -> None:
        upstream.respond(404, raw=b"not found")
        with pytest.raises(UpstreamError) as exc_info:
            await client.get("get_drug", REQUEST)
        err = exc_info.value
        assert err.message == "Request failed with status 404: not found"
        assert err.status_code == 404
        assert err.body == "not found"
        assert err.code is ErrorCode.EXTERNAL_SERVICE_ERROR
        assert err.error.tool_name == "get_drug"
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_server_error_not_retried(self, client: OffxClient, upstream: FakeOffx) -> None:
        upstream.respond(503, body={"error": "down"})
        with pytest.raises(UpstreamError, match="status 503"):
            await client.get("search_drugs", REQUEST)
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_timeout(self, client: OffxClient, upstream: FakeOffx) -> None:
        upstream.fail_with(httpx.ReadTimeout("read timed out"))
        with pytest.raises(UpstreamError, match="timed out after 5.0s") as exc_info:
            await client.get("search_drugs", REQUEST)
        assert exc_info.value.code is ErrorCode.TIMEOUT
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    @pytest.mark.asyncio
    async def test_network_error(self, client: OffxClient, upstream: FakeOffx) -> None:
        upstream.fail_with(httpx.ConnectError("connection refused"))
        with pytest.raises(UpstreamError, match="^Network error: connection refused$") as exc_info:
            await client.get("search_drugs", REQUEST)
        assert exc_info.value.code is ErrorCode.NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_invalid_json(self, client: OffxClient, upstream: FakeOffx) -> None:
        """The body snippet is kept on the error and logged."""
        buf = io.StringIO()
        configure_logging("json", output=buf)
        upstream.respond(200, raw=b"<html>oops</html>")
        with pytest.raises(UpstreamError, match="Invalid JSON") as exc_info:
            await client.get("search_drugs", REQUEST)
        assert exc_info.value.code is ErrorCode.PARSE_ERROR
        assert exc_info.value.error.details == "<html>oops</html>"
        [entry] = [orjson.loads(line) for line in buf.getvalue().splitlines()]
        assert entry["event"] == "upstream returned invalid JSON"
        assert entry["level"] == "warning"
        assert entry["body"] == "<html>oops</html>"

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, settings: OffxSettings, upstream: FakeOffx) -> None:
        async with OffxClient(settings, transport=httpx.MockTransport(upstream.handler)) as client:
            await client.get("search_drugs", REQUEST)
        with pytest.raises(RuntimeError):
            await client.get("search_drugs", REQUEST)
