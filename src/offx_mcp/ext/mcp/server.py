"""Server adapters exposing the OFF-X tools.

Two front-ends over one Dispatcher, chosen per process:

1. **FastMCP** - MCP protocol over stdio (default), SSE or streamable HTTP
2. **HTTP/JSON** - plain routes for web backends (`USE_HTTP=true`)

Example - MCP (Claude Desktop, Cursor, ...):
    >>> serve_mcp(dispatcher, transport="stdio")

Example - HTTP endpoints:
    >>> app = create_http_app(dispatcher)  # Starlette app
    >>> serve_http(dispatcher, port=3000)

HTTP routes:
    GET  /health      -> {"status": "ok"}
    POST /list_tools  -> {"tools": [{name, description, category, schema}]}
    POST /{tool}      -> tool result; errors are {"error": message, "code": status}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import orjson
import uvicorn
from fastmcp import FastMCP
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult
from mcp.types import CallToolRequestParams, CallToolResult
from pydantic.json_schema import SkipJsonSchema
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from offx_mcp import __version__
from offx_mcp.foundation.errors import InvalidArgument, MethodNotFound, ToolException
from offx_mcp.runtime.logging import get_logger

from .dispatcher import Dispatcher

if TYPE_CHECKING:
    from offx_mcp.foundation.config import Transport

SERVER_NAME = "offx"
SERVER_VERSION = __version__

ShutdownHook = Callable[[], Awaitable[None]]

_log = get_logger("offx.server")


# ═══════════════════════════════════════════════════════════════════════════════
# Abstract Server Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class ToolServer(ABC):
    """Abstract base for the front-ends.

    Subclasses adapt one transport while sharing the dispatcher. `on_shutdown`
    runs once when the server stops (the CLI closes the upstream client there).
    """

    __slots__ = ("_name", "_dispatcher", "_on_shutdown")

    def __init__(self, name: str, dispatcher: Dispatcher, *, on_shutdown: ShutdownHook | None = None) -> None:
        self._name = name
        self._dispatcher = dispatcher
        self._on_shutdown = on_shutdown

    @property
    def name(self) -> str:
        return self._name

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @abstractmethod
    def run(self, **kwargs: Any) -> None:
        """Start the server (blocking)."""
        ...

    @asynccontextmanager
    async def lifespan(self, _app: object) -> AsyncIterator[dict[str, Any]]:
        try:
            yield {}
        finally:
            if self._on_shutdown is not None:
                await self._on_shutdown()


# ═══════════════════════════════════════════════════════════════════════════════
# FastMCP Adapter (MCP Protocol)
# ═══════════════════════════════════════════════════════════════════════════════


class DispatchedTool(Tool):
    """FastMCP tool whose execution is handed to the dispatcher.

    Arguments reach the dispatcher unvalidated: the descriptor's inputSchema is
    advertised as-is and the tool's own parameter model does the checking.
    """

    dispatch: SkipJsonSchema[Callable[[str, Any], Awaitable[CallToolResult]]]

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.from_mcp_result(await self.dispatch(self.name, arguments))


class UnknownToolMiddleware(Middleware):
    """Sends calls for names outside the registry to the dispatcher.

    FastMCP would answer them itself with a bare error; routed through the
    dispatcher they fail as MethodNotFound and carry the -32601 error object.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        name = context.message.name
        if name in self._dispatcher.registry:
            return await call_next(context)
        return ToolResult.from_mcp_result(await self._dispatcher.call_tool_mcp(name, context.message.arguments))


class MCPServer(ToolServer):
    """FastMCP-backed server for MCP clients.

    Example:
        >>> server = MCPServer("offx", dispatcher)
        >>> server.run(transport="sse", port=3000)
    """

    __slots__ = ("_mcp",)

    def __init__(self, name: str, dispatcher: Dispatcher, *, on_shutdown: ShutdownHook | None = None) -> None:
        super().__init__(name, dispatcher, on_shutdown=on_shutdown)
        self._mcp = self._create_server()

    def _create_server(self) -> FastMCP:
        mcp = FastMCP(
            self._name,
            version=SERVER_VERSION,
            lifespan=self.lifespan,
            middleware=[UnknownToolMiddleware(self._dispatcher)],
        )
        for descriptor in self._dispatcher.list_tools():
            mcp.add_tool(DispatchedTool(
                name=descriptor.name,
                description=descriptor.description,
                parameters=descriptor.input_schema,
                tags={descriptor.category},
                dispatch=self._dispatcher.call_tool_mcp,
            ))
        return mcp

    def run(
        self,
        transport: Transport = "stdio",
        *,
        host: str = "127.0.0.1",
        port: int = 3000,
        path: str = "/mcp",
    ) -> None:
        """Start MCP server.

        Args:
            transport: "stdio" (CLI), "sse" or "streamable-http"
            host: Host for HTTP transports
            port: Port for HTTP transports
            path: Endpoint path for HTTP transports
        """
        _log.info("mcp server starting", server=self._name, transport=transport, tools=len(self._dispatcher.registry))
        if transport == "stdio":
            self._mcp.run("stdio", show_banner=False)
        else:
            self._mcp.run(transport=transport, show_banner=False, host=host, port=port, path=path)

    @property
    def fastmcp(self) -> FastMCP:
        """Access underlying FastMCP instance."""
        return self._mcp


# ═══════════════════════════════════════════════════════════════════════════════
# HTTP Adapter (Web Backends)
# ═══════════════════════════════════════════════════════════════════════════════


def _error_response(exc: ToolException) -> JSONResponse:
    return JSONResponse(exc.to_payload(), status_code=exc.http_status)


async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    """Unknown path, or a known path with the wrong method."""
    return JSONResponse({"error": "Not found", "code": 404}, status_code=404)


class HTTPToolServer(ToolServer):
    """Plain HTTP/JSON server; no MCP framing.

    Example:
        >>> server = HTTPToolServer("offx", dispatcher)
        >>> server.run(host="0.0.0.0", port=3000)
    """

    __slots__ = ("_app",)

    def __init__(self, name: str, dispatcher: Dispatcher, *, on_shutdown: ShutdownHook | None = None) -> None:
        super().__init__(name, dispatcher, on_shutdown=on_shutdown)
        self._app = self._create_app()

    def _create_app(self) -> Starlette:
        routes = [
            Route("/health", self._health, methods=["GET"]),
            Route("/list_tools", self._list_tools, methods=["POST"]),
            Route("/{tool}", self._invoke_tool, methods=["POST"]),
        ]
        return Starlette(
            routes=routes,
            exception_handlers={404: _not_found, 405: _not_found},
            lifespan=self.lifespan,
        )

    async def _health(self, request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    async def _list_tools(self, request: Request) -> JSONResponse:
        return JSONResponse({"tools": [d.summary() for d in self._dispatcher.list_tools()]})

    async def _invoke_tool(self, request: Request) -> Response:
        name = request.path_params["tool"]
        if name not in self._dispatcher.registry:
            return _error_response(MethodNotFound.create(name, "Not found"))
        try:
            body = orjson.loads(await request.body())
        except orjson.JSONDecodeError as e:
            return _error_response(InvalidArgument.create(name, f"Invalid JSON body: {e}"))
        if not isinstance(body, dict):
            return _error_response(InvalidArgument.create(name, "Request body must be a JSON object"))
        try:
            result = await self._dispatcher.call_tool(name, body, transport="http")
        except ToolException as e:
            return _error_response(e)
        return Response(orjson.dumps(result), media_type="application/json")

    def run(self, host: str = "127.0.0.1", port: int = 3000, *, log_level: str = "info") -> None:
        """Start HTTP server."""
        _log.info("http server starting", server=self._name, host=host, port=port)
        uvicorn.run(self._app, host=host, port=port, log_level=log_level)

    @property
    def app(self) -> Starlette:
        """Access ASGI app for embedding in larger applications."""
        return self._app


# ═══════════════════════════════════════════════════════════════════════════════
# Factory Functions
# ═══════════════════════════════════════════════════════════════════════════════


def serve_mcp(
    dispatcher: Dispatcher,
    *,
    name: str = SERVER_NAME,
    transport: Transport = "stdio",
    host: str = "127.0.0.1",
    port: int = 3000,
    path: str = "/mcp",
    on_shutdown: ShutdownHook | None = None,
) -> None:
    """Expose the tools over MCP (blocking)."""
    MCPServer(name, dispatcher, on_shutdown=on_shutdown).run(transport, host=host, port=port, path=path)


def serve_http(
    dispatcher: Dispatcher,
    *,
    name: str = SERVER_NAME,
    host: str = "127.0.0.1",
    port: int = 3000,
    log_level: str = "info",
    on_shutdown: ShutdownHook | None = None,
) -> None:
    """Expose the tools over plain HTTP/JSON (blocking)."""
    HTTPToolServer(name, dispatcher, on_shutdown=on_shutdown).run(host, port, log_level=log_level)


def create_http_app(dispatcher: Dispatcher, name: str = SERVER_NAME) -> Starlette:
    """Create the ASGI app without running it."""
    return HTTPToolServer(name, dispatcher).app


def create_mcp_server(dispatcher: Dispatcher, name: str = SERVER_NAME) -> MCPServer:
    """Create MCP server without starting it."""
    return MCPServer(name, dispatcher)
