"""Adverse-event lookups: name search, and the events linked to a drug or target."""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import Field, model_validator

from offx_mcp.foundation.core import BaseTool, FieldKind, ToolExample, ToolMetadata, ToolParams, invalid
from offx_mcp.io import UpstreamRequest

from .filters import DrugId, TargetId

ADVERSE_EVENT_SEARCH_PATH = "/adverseevent/search/param"


class SearchAdverseEventsParams(ToolParams):
    # Minimum length is documented for clients but left to the API to enforce
    adverse_event: Annotated[str, FieldKind.TEXT, Field(
        description="Adverse event name (min 3 chars, required)", examples=["Anaemia"],
    )]


class SearchAdverseEvents(BaseTool[SearchAdverseEventsParams]):
    metadata = ToolMetadata(
        name="search_adverse_events",
        description=(
            'Search for adverse events by name (min 3 chars). Use the "adverse_event" parameter for '
            "lookup or autocomplete of adverse event names."
        ),
        category="adverse_events",
        examples=(ToolExample(description="Search adverse events by name", usage={"adverse_event": "Anaemia"}),),
    )
    params_schema = SearchAdverseEventsParams

    def build(self, params: SearchAdverseEventsParams) -> UpstreamRequest:
        return UpstreamRequest(ADVERSE_EVENT_SEARCH_PATH, params.query())


class AdverseEventsParams(ToolParams):
    combination_schema = {"anyOf": [{"required": ["drug_id"]}, {"required": ["target_id"]}]}

    drug_id: Annotated[DrugId, Field(description="Drug identifier (OFFX drug_id, optional)")] = None
    target_id: Annotated[TargetId, Field(description="Target identifier (OFFX target_id, optional)")] = None

    @model_validator(mode="after")
    def _one_subject(self) -> Self:
        if (self.drug_id is None) == (self.target_id is None):
            raise invalid("You must provide exactly one of: drug_id or target_id")
        return self


class GetAdverseEvents(BaseTool[AdverseEventsParams]):
    metadata = ToolMetadata(
        name="get_adverse_events",
        description=(
            "Get the list of adverse event types associated with a drug (by drug_id) or target (by "
            "target_id). Does not support filtering by severity, date, or other attributes, and does "
            "not return individual alert records. Use to see all adverse events ever associated with "
            "a drug or target."
        ),
        category="adverse_events",
        examples=(
            ToolExample(description="Get adverse events by drug id", usage={"drug_id": "12345"}),
            ToolExample(description="Get adverse events by target id", usage={"target_id": "67890"}),
        ),
    )
    params_schema = AdverseEventsParams

    def build(self, params: AdverseEventsParams) -> UpstreamRequest:
        return UpstreamRequest(ADVERSE_EVENT_SEARCH_PATH, params.query())
