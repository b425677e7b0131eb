"""Central registry for tool discovery and lookup.

The registry is filled once at startup and only read afterwards; both
front-ends share the same instance.
"""

from __future__ import annotations

from collections.abc import Iterator

from offx_mcp.foundation.core import BaseTool, ToolDescriptor
from offx_mcp.foundation.errors import MethodNotFound


class ToolRegistry:
    """Read-only table of tools keyed by name.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(SearchDrugs(client))
        >>> registry.get("search_drugs").descriptor().name
        'search_drugs'
        >>> registry.get("nope")
        Traceback (most recent call last):
        MethodNotFound: Unknown tool: nope
    """

    __slots__ = ("_tools",)

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance. Names are unique."""
        name = tool.metadata.name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered")
        self._tools[name] = tool

    def get(self, name: str) -> BaseTool:
        """Get tool by name; unknown names raise MethodNotFound."""
        if (tool := self._tools.get(name)) is None:
            raise MethodNotFound.create(name or "unknown", f"Unknown tool: {name}")
        return tool

    def list(self) -> list[ToolDescriptor]:
        """Descriptors for every registered tool, in registration order."""
        return [tool.descriptor() for tool in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools.values())

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
