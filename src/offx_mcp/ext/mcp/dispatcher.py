"""Transport-neutral tool invocation shared by the MCP and HTTP front-ends.

The dispatcher owns the per-call lifecycle: look the tool up, coerce the raw
arguments, run it (validate -> build -> one upstream GET), log the outcome.
Every failure leaves as a ToolException; each front-end maps it onto its own
wire shape via `mcp_code` / `http_status`.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING

import orjson
from mcp.types import CallToolResult, TextContent

from offx_mcp.foundation.errors import ErrorCode, InvalidArgument, JsonValue, ToolException
from offx_mcp.runtime.logging import elapsed_ms, get_logger, log_context

if TYPE_CHECKING:
    from offx_mcp.foundation.core import BaseTool, ToolDescriptor
    from offx_mcp.foundation.registry import ToolRegistry


def render_result(result: JsonValue) -> str:
    """Pretty-print a result (2-space indent) for an MCP text content item."""
    return orjson.dumps(result, option=orjson.OPT_INDENT_2).decode()


class Dispatcher:
    """Routes named calls to registry tools.

    Example:
        >>> dispatcher = Dispatcher(create_registry(client))
        >>> await dispatcher.call_tool("search_drugs", "everolimus")
        {'drugs': [...]}
    """

    __slots__ = ("_registry", "_log")

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry
        self._log = get_logger("offx.dispatcher")

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def list_tools(self) -> list[ToolDescriptor]:
        return self._registry.list()

    async def call_tool(self, name: str, arguments: object = None, *, transport: str = "mcp") -> JsonValue:
        """Invoke `name` with `arguments` and return its JSON result.

        `arguments` is a JSON object, None, or (for single-field tools) a bare
        string standing for that field.

        Raises:
            InvalidArgument: bad arguments, nothing was sent upstream
            MethodNotFound: unknown tool name
            UpstreamError: the single upstream GET failed
            ToolException: any other failure, code UNKNOWN
        """
        log = self._log
        start = time.perf_counter()
        # Upstream client records inherit tool and transport
        with log_context(tool=name, transport=transport):
            log.debug("tool call started")
            try:
                tool = self._registry.get(name)
                result = await tool(_coerce_arguments(tool, arguments))
            except ToolException as e:
                log.warning("tool call failed", error_code=str(e.code), error=e.message, duration_ms=elapsed_ms(start))
                raise
            except Exception as e:
                log.exception("tool call crashed", duration_ms=elapsed_ms(start))
                raise ToolException.create(name or "unknown", str(e) or type(e).__name__, ErrorCode.UNKNOWN) from e
            log.info("tool call ok", duration_ms=elapsed_ms(start))
        return result

    async def call_tool_mcp(self, name: str, arguments: object = None) -> CallToolResult:
        """Invoke for the MCP front-end.

        Success is one text item holding the pretty-printed result. Failure is
        an error result whose text is the message and whose `_meta.error`
        carries the JSON-RPC `{code, message}` pair.
        """
        try:
            result = await self.call_tool(name, arguments, transport="mcp")
        except ToolException as e:
            return CallToolResult(
                content=[TextContent(type="text", text=e.message)],
                is_error=True,
                meta={"error": {"code": e.mcp_code, "message": e.message}},
            )
        return CallToolResult(content=[TextContent(type="text", text=render_result(result))])


def _coerce_arguments(tool: BaseTool, arguments: object) -> Mapping[str, object] | None:
    """Accept a bare string for single-field tools.

    Only programmatic `Dispatcher` callers reach the string branch; MCP and HTTP
    arguments always arrive as objects.
    """
    if arguments is None or isinstance(arguments, Mapping):
        return arguments
    if isinstance(arguments, str) and (field := tool.bare_field) is not None:
        return {field: arguments}
    raise InvalidArgument.create(tool.name, "Arguments must be a JSON object")
