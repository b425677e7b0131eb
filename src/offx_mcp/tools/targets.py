"""Target lookups: name search, target masterview, and targets of a drug or adverse event."""

from __future__ import annotations

from typing import Annotated, Literal, Self

from pydantic import Field, model_validator

from offx_mcp.foundation.core import BaseTool, FieldKind, ToolExample, ToolMetadata, ToolParams, invalid
from offx_mcp.foundation.errors import JsonValue
from offx_mcp.io import UpstreamRequest

from .filters import (
    TARGET_MASTERVIEW_FILTERS,
    ActionId,
    AdverseEventId,
    AlertCausality,
    AlertDateFrom,
    AlertDateTo,
    AlertLevelEvidence,
    AlertOnOffTarget,
    AlertPhase,
    AlertSeverity,
    AlertSpecies,
    AlertType,
    DrugId,
    RefSourceType,
    RequiredPage,
    TargetId,
)

TARGET_SEARCH_PATH = "/target/search/param"
TARGET_MASTERVIEW_PATH = "/target/masterview/param"
TARGETS_BY_DRUG_PATHS = {
    "primary": "/target/primary/search/param",
    "secondary": "/target/secondary/search/param",
}


# ═══════════════════════════════════════════════════════════════════════════════
# search_targets
# ═══════════════════════════════════════════════════════════════════════════════


class SearchTargetsParams(ToolParams):
    target: Annotated[str, FieldKind.TEXT, Field(description="Target name (required)", examples=["ALK"])]


class SearchTargets(BaseTool[SearchTargetsParams]):
    metadata = ToolMetadata(
        name="search_targets",
        description=(
            'Search for targets by name. Use the "target" parameter to find targets matching a partial '
            "or full name. Useful for lookup and autocomplete."
        ),
        category="targets",
        examples=(ToolExample(description="Search for targets by name", usage={"target": "ALK"}),),
    )
    params_schema = SearchTargetsParams

    def build(self, params: SearchTargetsParams) -> UpstreamRequest:
        return UpstreamRequest(TARGET_SEARCH_PATH, params.query())


# ═══════════════════════════════════════════════════════════════════════════════
# get_target (masterview)
# ═══════════════════════════════════════════════════════════════════════════════


class TargetMasterviewParams(ToolParams):
    target_id: Annotated[TargetId, Field(description="Target identifier (OFFX target_id, required)")]
    action_id: Annotated[ActionId, Field(description="Action identifier (OFFX action_id, required)")]
    page: RequiredPage
    adverse_event_id: AdverseEventId = None
    ref_source_type: RefSourceType = None
    alert_type: AlertType = None
    alert_phase: AlertPhase = None
    alert_level_evidence: AlertLevelEvidence = None
    alert_onoff_target: AlertOnOffTarget = None
    alert_severity: AlertSeverity = None
    alert_causality: AlertCausality = None
    alert_species: AlertSpecies = None
    alert_date_from: AlertDateFrom = None
    alert_date_to: AlertDateTo = None


class GetTargetMasterview(BaseTool[TargetMasterviewParams]):
    metadata = ToolMetadata(
        name="get_target",
        description=(
            "Get a summary (masterview) for a target by target_id and action_id. Supports optional filters "
            "(e.g., adverse_event_id, alert_type, alert_phase, alert_severity, alert_date_from, "
            "alert_date_to, etc.) to refine the summary. Use for a high-level overview, not for listing "
            "all alerts."
        ),
        category="targets",
        examples=(
            ToolExample(description="Get target masterview", usage={"target_id": "158", "action_id": "15", "page": 1}),
            ToolExample(
                description="Get target masterview with filters",
                usage={"target_id": "158", "action_id": "15", "page": 2, "alert_type": "2"},
            ),
        ),
    )
    params_schema = TargetMasterviewParams

    def build(self, params: TargetMasterviewParams) -> UpstreamRequest:
        query = params.query("target_id", "action_id", "page", *TARGET_MASTERVIEW_FILTERS)
        return UpstreamRequest(TARGET_MASTERVIEW_PATH, query)


# ═══════════════════════════════════════════════════════════════════════════════
# get_targets
# ═══════════════════════════════════════════════════════════════════════════════


class TargetsParams(ToolParams):
    """drug_id (with `type`) or adverse_event_id, never both.

    `type` is checked against its enum on both branches; only drug lookups use it.
    """

    combination_schema = {"anyOf": [{"required": ["drug_id"]}, {"required": ["adverse_event_id"]}]}

    drug_id: Annotated[DrugId, Field(
        description="Drug identifier (OFFX drug_id, required for primary/secondary targets)",
    )] = None
    type: Annotated[Literal["primary", "secondary"], FieldKind.ENUM, Field(
        description='Type of targets to fetch: "primary" or "secondary" (used with drug_id, default: primary)',
    )] = "primary"
    adverse_event_id: Annotated[AdverseEventId, Field(
        description="Adverse event identifier (OFFX adverse_event_id, required for adverse event search)",
    )] = None

    @model_validator(mode="after")
    def _one_subject(self) -> Self:
        if (self.drug_id is None) == (self.adverse_event_id is None):
            raise invalid("You must provide exactly one of: drug_id or adverse_event_id")
        return self

    @property
    def result_key(self) -> str:
        """Member the reshaped result is keyed under."""
        return f"{self.type}_targets" if self.drug_id is not None else "targets"


class GetTargets(BaseTool[TargetsParams]):
    """Targets of a drug (primary or secondary) or of an adverse event.

    The upstream body is reshaped to a single list member: `primary_targets`,
    `secondary_targets` or `targets`. A missing or empty upstream `targets`
    member becomes `[]`.
    """

    metadata = ToolMetadata(
        name="get_targets",
        description=(
            "Get primary or secondary targets for a drug (by drug_id, with type=primary/secondary), or all "
            "targets associated with an adverse event (by adverse_event_id). Use to explore drug-target "
            "relationships or find targets linked to a specific adverse event."
        ),
        category="targets",
        examples=(
            ToolExample(description="Get primary targets for a drug", usage={"drug_id": "11204", "type": "primary"}),
            ToolExample(description="Get secondary targets for a drug", usage={"drug_id": "11204", "type": "secondary"}),
            ToolExample(description="Get targets by adverse event id", usage={"adverse_event_id": "10001551"}),
        ),
    )
    params_schema = TargetsParams

    def build(self, params: TargetsParams) -> UpstreamRequest:
        if params.drug_id is not None:
            return UpstreamRequest(TARGETS_BY_DRUG_PATHS[params.type], params.query("drug_id"))
        return UpstreamRequest(TARGET_SEARCH_PATH, params.query("adverse_event_id"))

    async def run(self, params: TargetsParams) -> JsonValue:
        body = await super().run(params)
        targets = body.get("targets") if isinstance(body, dict) else None
        return {params.result_key: targets or []}
