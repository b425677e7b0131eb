"""The ten OFF-X tools and the registry factory.

Each tool validates its arguments, shapes them into one GET against a fixed
OFF-X path and passes the JSON body back (only `get_targets` reshapes it).

Example:
    >>> registry = create_registry(OffxClient(settings))
    >>> registry.list_names()[:3]
    ['search_drugs', 'get_drugs', 'get_alerts']
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from offx_mcp.foundation.core import BaseTool
from offx_mcp.foundation.registry import ToolRegistry

from .adverse_events import GetAdverseEvents, SearchAdverseEvents
from .alerts import GetAlerts
from .drugs import GetDrugMasterview, GetDrugs, SearchDrugsByName
from .scores import GetScore
from .targets import GetTargetMasterview, GetTargets, SearchTargets

if TYPE_CHECKING:
    from offx_mcp.io import OffxClient

# Registration (and listing) order
TOOL_CLASSES: tuple[type[BaseTool], ...] = (
    SearchDrugsByName,
    GetDrugs,
    GetAlerts,
    GetScore,
    GetDrugMasterview,
    SearchAdverseEvents,
    GetAdverseEvents,
    SearchTargets,
    GetTargetMasterview,
    GetTargets,
)


def create_registry(client: OffxClient) -> ToolRegistry:
    """Instantiate every tool against `client` and register it."""
    registry = ToolRegistry()
    for cls in TOOL_CLASSES:
        registry.register(cls(client))
    return registry


__all__ = [
    "TOOL_CLASSES", "create_registry",
    "SearchDrugsByName", "GetDrugs", "GetAlerts", "GetScore", "GetDrugMasterview",
    "SearchAdverseEvents", "GetAdverseEvents", "SearchTargets", "GetTargetMasterview", "GetTargets",
]
