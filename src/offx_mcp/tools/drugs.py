"""Drug lookups: name search, drugs by target/action or adverse event, drug masterview."""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import Field, model_validator

from offx_mcp.foundation.core import BaseTool, FieldKind, ToolExample, ToolMetadata, ToolParams, invalid
from offx_mcp.io import UpstreamRequest

from .filters import (
    MASTERVIEW_FILTERS,
    ActionId,
    AdverseEventId,
    AlertCausality,
    AlertDateFrom,
    AlertDateTo,
    AlertLevelEvidence,
    AlertPhase,
    AlertSeverity,
    AlertSpecies,
    AlertType,
    DrugId,
    Page,
    RefSourceType,
    RequiredPage,
    TargetId,
)

DRUG_SEARCH_PATH = "/drug/search/param"
DRUG_MASTERVIEW_PATH = "/drug/masterview/param"


# ═══════════════════════════════════════════════════════════════════════════════
# search_drugs
# ═══════════════════════════════════════════════════════════════════════════════


class SearchDrugsParams(ToolParams):
    drug: Annotated[str, FieldKind.TEXT, Field(description="Drug name (required)", examples=["everolimus"])]


class SearchDrugsByName(BaseTool[SearchDrugsParams]):
    """Partial or full drug-name search; callable with a bare string over MCP."""

    metadata = ToolMetadata(
        name="search_drugs",
        description=(
            'Search for drugs by name. Use the "drug" parameter to find drugs matching a partial '
            "or full name. Useful for lookup and autocomplete."
        ),
        category="drugs",
        examples=(ToolExample(description="Search for drugs by name", usage={"drug": "everolimus"}),),
    )
    params_schema = SearchDrugsParams

    def build(self, params: SearchDrugsParams) -> UpstreamRequest:
        return UpstreamRequest(DRUG_SEARCH_PATH, params.query())


# ═══════════════════════════════════════════════════════════════════════════════
# get_drugs
# ═══════════════════════════════════════════════════════════════════════════════


class GetDrugsParams(ToolParams):
    """Either target_id + action_id, or adverse_event_id alone."""

    combination_schema = {
        "oneOf": [
            {"required": ["target_id", "action_id"], "not": {"required": ["adverse_event_id"]}},
            {"required": ["adverse_event_id"], "not": {"anyOf": [{"required": ["target_id"]}, {"required": ["action_id"]}]}},
        ],
    }

    target_id: TargetId = None
    action_id: ActionId = None
    adverse_event_id: AdverseEventId = None
    page: Page = 1

    @model_validator(mode="after")
    def _one_lookup(self) -> Self:
        by_target = self.has("target_id", "action_id") and self.adverse_event_id is None
        by_event = self.adverse_event_id is not None and self.target_id is None and self.action_id is None
        if not (by_target or by_event):
            raise invalid("You must provide either both target_id and action_id, or only adverse_event_id")
        return self


class GetDrugs(BaseTool[GetDrugsParams]):
    metadata = ToolMetadata(
        name="get_drugs",
        description=(
            "Get drugs by both target_id and action_id (together), or by adverse_event_id (alone). "
            "Use target_id+action_id to find drugs acting on a specific target/action, or "
            "adverse_event_id to find drugs associated with a specific adverse event."
        ),
        category="drugs",
        examples=(
            ToolExample(description="By target and action", usage={"target_id": "123", "action_id": "456"}),
            ToolExample(description="By adverse event", usage={"adverse_event_id": "10001551"}),
        ),
    )
    params_schema = GetDrugsParams

    def build(self, params: GetDrugsParams) -> UpstreamRequest:
        # Only one branch's ids are set, so declaration order yields the right query
        return UpstreamRequest(DRUG_SEARCH_PATH, params.query())


# ═══════════════════════════════════════════════════════════════════════════════
# get_drug (masterview)
# ═══════════════════════════════════════════════════════════════════════════════


class DrugMasterviewParams(ToolParams):
    drug_id: Annotated[DrugId, Field(description="Drug identifier (OFFX drug_id, required)")]
    page: RequiredPage
    adverse_event_id: AdverseEventId = None
    ref_source_type: RefSourceType = None
    alert_type: AlertType = None
    alert_phase: AlertPhase = None
    alert_level_evidence: AlertLevelEvidence = None
    alert_severity: AlertSeverity = None
    alert_causality: AlertCausality = None
    alert_species: AlertSpecies = None
    alert_date_from: AlertDateFrom = None
    alert_date_to: AlertDateTo = None


class GetDrugMasterview(BaseTool[DrugMasterviewParams]):
    metadata = ToolMetadata(
        name="get_drug",
        description=(
            "Get a summary (masterview) for a drug by drug_id. Supports optional filters (e.g., "
            "adverse_event_id, alert_type, alert_phase, alert_severity, alert_date_from, alert_date_to, "
            "etc.) to refine the summary. Use for a high-level overview, not for listing all alerts."
        ),
        category="drugs",
        examples=(
            ToolExample(description="Get drug masterview for a drug", usage={"drug_id": "11204", "page": 1}),
            ToolExample(
                description="Get drug masterview for a drug with filters",
                usage={"drug_id": "11204", "page": 2, "alert_type": "2"},
            ),
        ),
    )
    params_schema = DrugMasterviewParams

    def build(self, params: DrugMasterviewParams) -> UpstreamRequest:
        return UpstreamRequest(DRUG_MASTERVIEW_PATH, params.query("drug_id", "page", *MASTERVIEW_FILTERS))
