"""Individual alert records for a drug or a target, with filtering."""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import Field, model_validator

from offx_mcp.foundation.core import BaseTool, ToolExample, ToolMetadata, ToolParams, invalid
from offx_mcp.io import UpstreamRequest

from .filters import (
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
    OrderByAdv,
    OrderByDate,
    Page,
    RefSourceType,
    TargetId,
)

DRUG_ALERTS_PATH = "/drug/alerts/param"
TARGET_ALERTS_PATH = "/target/alerts/param"

# Optional filters forwarded verbatim, in query order
ALERT_FILTERS: tuple[str, ...] = (
    "action_id", "adverse_event_id", "ref_source_type", "alert_type", "alert_phase",
    "alert_level_evidence", "alert_onoff_target", "alert_severity", "alert_causality",
    "alert_species", "alert_date_from", "alert_date_to", "order_by_date", "order_by_adv",
)


class AlertsParams(ToolParams):
    """Exactly one of drug_id / target_id selects the alert listing."""

    combination_schema = {"anyOf": [{"required": ["drug_id"]}, {"required": ["target_id"]}]}

    drug_id: Annotated[DrugId, Field(description="Drug identifier (OFFX drug_id, optional)")] = None
    target_id: Annotated[TargetId, Field(description="Target identifier (OFFX target_id, optional)")] = None
    action_id: Annotated[ActionId, Field(description="Action ID (optional, for target alerts)")] = None
    page: Page = 1
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
    order_by_date: OrderByDate = None
    order_by_adv: OrderByAdv = None

    @model_validator(mode="after")
    def _one_subject(self) -> Self:
        if (self.drug_id is None) == (self.target_id is None):
            raise invalid("You must provide exactly one of: drug_id or target_id")
        return self


class GetAlerts(BaseTool[AlertsParams]):
    """Routes to the drug- or target-alerts listing depending on which id is set."""

    metadata = ToolMetadata(
        name="get_alerts",
        description=(
            "Get individual alert records for a drug (by drug_id) or a target (by target_id). Supports "
            "powerful filtering by severity (alert_severity), date range (alert_date_from, alert_date_to), "
            "alert type, phase, level of evidence, causality, species, and more. Use this endpoint to answer "
            'questions like "What severe adverse events have been reported for drug X in the last 2 weeks?"'
        ),
        category="alerts",
        examples=(
            ToolExample(description="Get alerts for a drug", usage={"drug_id": "11204", "page": 1}),
            ToolExample(description="Get alerts for a target", usage={"target_id": "158", "page": 1}),
            ToolExample(
                description="Get alerts for a target with filters",
                usage={"target_id": "158", "page": 2, "alert_type": "2"},
            ),
        ),
    )
    params_schema = AlertsParams

    def build(self, params: AlertsParams) -> UpstreamRequest:
        path = DRUG_ALERTS_PATH if params.drug_id is not None else TARGET_ALERTS_PATH
        return UpstreamRequest(path, params.query("drug_id", "target_id", "page", *ALERT_FILTERS))
