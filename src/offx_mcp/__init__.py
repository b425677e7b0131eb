"""OFF-X MCP Server - gateway to the OFF-X Target Safety API.

Exposes ten read-only pharmacovigilance lookups (drugs, targets, adverse
events, alerts, risk scores) as MCP tools or as plain HTTP/JSON routes. Each
call validates its arguments, issues one authenticated GET against the OFF-X
REST API and hands the JSON back.

Quick Start (MCP over stdio):
    $ OFFX_API_TOKEN=... offx-mcp-server

HTTP mode:
    $ OFFX_API_TOKEN=... USE_HTTP=true PORT=3000 offx-mcp-server
    $ curl -X POST localhost:3000/search_drugs -d '{"drug": "everolimus"}'

Programmatic:
    >>> from offx_mcp import Dispatcher, OffxClient, create_registry, get_settings
    >>> client = OffxClient(get_settings())
    >>> dispatcher = Dispatcher(create_registry(client))
    >>> await dispatcher.call_tool("get_score", {"drug_id": "99402"})
"""

from __future__ import annotations

__version__ = "0.1.0"

# Foundation
from .foundation import (
    BaseTool,
    ErrorCode,
    FieldKind,
    InvalidArgument,
    MethodNotFound,
    OffxSettings,
    ToolDescriptor,
    ToolError,
    ToolException,
    ToolMetadata,
    ToolParams,
    ToolRegistry,
    UpstreamError,
    clear_settings_cache,
    get_settings,
)

# Upstream
from .io import OffxClient, UpstreamRequest

# Tools
from .tools import TOOL_CLASSES, create_registry

# Front-ends
from .ext.mcp import Dispatcher, create_http_app, create_mcp_server, serve_http, serve_mcp

# Logging
from .runtime import configure_logging, get_logger

__all__ = [
    "__version__",
    # Foundation
    "BaseTool", "ToolMetadata", "ToolDescriptor", "ToolParams", "FieldKind", "ToolRegistry",
    "ErrorCode", "ToolError", "ToolException", "InvalidArgument", "MethodNotFound", "UpstreamError",
    "OffxSettings", "get_settings", "clear_settings_cache",
    # Upstream
    "OffxClient", "UpstreamRequest",
    # Tools
    "TOOL_CLASSES", "create_registry",
    # Front-ends
    "Dispatcher", "serve_mcp", "serve_http", "create_http_app", "create_mcp_server",
    # Logging
    "configure_logging", "get_logger",
]
