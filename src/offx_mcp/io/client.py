"""Async client for the OFF-X REST API.

One `httpx.AsyncClient` (one connection pool) is shared by every call. Each
call is exactly one GET with an explicit timeout; nothing is retried. Failures
come back as UpstreamError:

- non-2xx: message `Request failed with status <code>: <body>`
- timeout, connection or protocol failure: cause chained, code TIMEOUT / NETWORK_ERROR
- undecodable body: cause chained, code PARSE_ERROR
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

import httpx
import orjson

from offx_mcp.foundation.errors import ErrorCode, JsonValue, UpstreamError
from offx_mcp.runtime.logging import elapsed_ms, get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from offx_mcp.foundation.config import OffxSettings

_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}


@dataclass(frozen=True, slots=True)
class UpstreamRequest:
    """GET against a fixed API path. `params` never contains the token."""

    path: str
    params: tuple[tuple[str, str], ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))

    @property
    def query(self) -> dict[str, str]:
        """Params as a dict (last value wins), for assertions and logs."""
        return dict(self.params)


class OffxClient:
    """Thin async wrapper issuing authenticated GETs.

    Example:
        >>> async with OffxClient(settings) as client:
        ...     body = await client.get("search_drugs", UpstreamRequest("/drug/search/param", [("drug", "everolimus")]))
    """

    __slots__ = ("_settings", "_client", "_log")

    def __init__(self, settings: OffxSettings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            headers=_HEADERS,
            timeout=httpx.Timeout(settings.http_timeout),
            transport=transport,
        )
        self._log = get_logger("offx.client")

    @property
    def timeout(self) -> float:
        return self._settings.http_timeout

    async def get(self, tool_name: str, request: UpstreamRequest) -> JsonValue:
        """Issue the GET and decode the JSON body.

        Raises:
            UpstreamError: non-2xx status, transport failure or invalid JSON
        """
        log = self._log.bind(tool=tool_name, path=request.path)
        log.debug("upstream request", query=request.query)
        # Token goes last, after the validated fields
        params = [*request.params, ("token", self._settings.api_token.get_secret_value())]
        start = time.perf_counter()
        try:
            response = await self._client.get(request.path, params=params)
        except httpx.TimeoutException as e:
            log.warning("upstream timeout", duration_ms=elapsed_ms(start))
            raise UpstreamError.create(tool_name, f"Request timed out after {self.timeout}s", ErrorCode.TIMEOUT) from e
        except httpx.RequestError as e:
            log.warning("upstream unreachable", error=str(e), duration_ms=elapsed_ms(start))
            raise UpstreamError.create(tool_name, f"Network error: {e}", ErrorCode.NETWORK_ERROR) from e

        log.debug("upstream response", status=response.status_code, duration_ms=elapsed_ms(start))
        if not response.is_success:
            raise UpstreamError.from_response(tool_name, response.status_code, response.text)
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            snippet = response.text[:500]
            log.warning("upstream returned invalid JSON", error=str(e), body=snippet)
            raise UpstreamError.create(
                tool_name, f"Invalid JSON in upstream response: {e}", ErrorCode.PARSE_ERROR, details=snippet,
            ) from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                        exc_tb: TracebackType | None) -> None:
        await self.aclose()
