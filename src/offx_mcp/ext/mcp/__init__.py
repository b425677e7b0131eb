"""MCP and HTTP front-ends sharing one dispatcher.

Example:
    >>> from offx_mcp.ext.mcp import Dispatcher, serve_mcp
    >>> serve_mcp(Dispatcher(registry), transport="stdio")
"""

from __future__ import annotations

from .dispatcher import Dispatcher, render_result
from .server import (
    SERVER_NAME,
    SERVER_VERSION,
    DispatchedTool,
    HTTPToolServer,
    MCPServer,
    ToolServer,
    UnknownToolMiddleware,
    create_http_app,
    create_mcp_server,
    serve_http,
    serve_mcp,
)

__all__ = [
    "Dispatcher", "render_result",
    "ToolServer", "MCPServer", "HTTPToolServer", "DispatchedTool", "UnknownToolMiddleware",
    "serve_mcp", "serve_http", "create_http_app", "create_mcp_server",
    "SERVER_NAME", "SERVER_VERSION",
]
