"""Reusable parameter types shared by the OFF-X tools.

Identifiers and alert filters are declared once here as `Annotated` aliases
carrying their FieldKind and documentation, then reused across the parameter
models. Coded filters document their code table in `enumDescriptions`; they
accept a single code or a comma-separated list, so no JSON-schema `enum` is
emitted for them.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from offx_mcp.foundation.core import FieldKind

# ═══════════════════════════════════════════════════════════════════════════════
# Code Tables
# ═══════════════════════════════════════════════════════════════════════════════

REF_SOURCE_TYPES: dict[str, str] = {
    "9": "Congress", "10": "Website Reference", "11": "Company Communication",
    "27": "Health Organization", "24": "Database", "22": "DailyMed",
    "23": "Regulatory Agency Briefing", "25": "Patent", "12": "Medical Society Communication",
    "13": "Research Institution Communication", "14": "Regulatory Agency Communication",
    "15": "Regulatory Agency Guideline", "16": "Patient Advocacy Group communication",
    "17": "Other", "18": "Book", "19": "Journal", "20": "Congress Alert",
    "21": "Congress & Conferences", "26": "Clinical Trial Registry",
}

ALERT_TYPES: dict[str, str] = {"1": "Class Alert", "2": "Drug Alert", "1,2": "Both"}

ALERT_PHASES: dict[str, str] = {
    "1": "Clinical/Postmarketing", "2": "Preclinical", "3": "Clinical", "4": "Postmarketing",
    "5": "Target Discovery", "6": "Phase I", "7": "Phase II", "8": "Phase III", "9": "Phase IV",
    "10": "Phase I/II", "11": "Phase II/III", "12": "Phase III/IV",
}

EVIDENCE_LEVELS: dict[str, str] = {"1": "Confirmed/Reported", "2": "Suspected", "3": "Refuted/Not Associated"}

ONOFF_TARGET: dict[str, str] = {"1": "On-Target", "2": "Off-Target", "3": "Not Specified"}


def _coded(table: dict[str, str], fmt: str) -> dict[str, object]:
    return {"enumDescriptions": dict(table), "format": fmt}


# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

NumberList = Annotated[str | None, FieldKind.NUMBER_LIST]

DrugId = Annotated[NumberList, Field(description="Drug identifier (OFFX drug_id)", examples=["99402"])]
TargetId = Annotated[NumberList, Field(description="Target identifier (OFFX target_id)", examples=["158"])]
ActionId = Annotated[NumberList, Field(description="Action identifier (OFFX action_id)", examples=["15"])]
AdverseEventId = Annotated[NumberList, Field(
    description="Adverse event identifier (OFFX adverse_event_id)", examples=["10001551"],
)]

Page = Annotated[int, FieldKind.NUMBER, Field(description="Page number (default: 1)")]
RequiredPage = Annotated[int, FieldKind.NUMBER, Field(description="Page number (required)")]

# ═══════════════════════════════════════════════════════════════════════════════
# Alert Filters
# ═══════════════════════════════════════════════════════════════════════════════

RefSourceType = Annotated[NumberList, Field(
    description="Reference source type (optional, comma separated number)",
    json_schema_extra=_coded(REF_SOURCE_TYPES, "Comma separated number(s), e.g. 9 or 9,10,11"),
)]
AlertType = Annotated[NumberList, Field(
    description="Alert Type (optional, comma separated number): 1 = Class Alert, 2 = Drug Alert, 1,2 = both",
    json_schema_extra=_coded(ALERT_TYPES, "Comma separated number(s), e.g. 1 or 1,2"),
    examples=["1", "2", "1,2"],
)]
AlertPhase = Annotated[NumberList, Field(
    description="Alert Phase (optional, comma separated number)",
    json_schema_extra=_coded(ALERT_PHASES, "Comma separated number(s), e.g. 1 or 1,2,3"),
    examples=["1", "1,2", "1,2,3,4,5,6"],
)]
AlertLevelEvidence = Annotated[NumberList, Field(
    description="Level of evidence (optional, comma separated number)",
    json_schema_extra=_coded(EVIDENCE_LEVELS, "Comma separated number(s), e.g. 1 or 1,2"),
    examples=["1", "2", "1,2"],
)]
AlertOnOffTarget = Annotated[NumberList, Field(
    description="On/Off target (optional, comma separated number)",
    json_schema_extra=_coded(ONOFF_TARGET, "Comma separated number(s), e.g. 1 or 1,2"),
    examples=["1", "2", "1,2"],
)]
AlertSeverity = Annotated[Literal["yes", "no"] | None, FieldKind.ENUM, Field(
    description="Alert Severity (optional, string: yes or no)", examples=["yes", "no"],
)]
AlertCausality = Annotated[str | None, FieldKind.TEXT, Field(description="Alert Causality (optional)")]
AlertSpecies = Annotated[str | None, FieldKind.TEXT, Field(description="Alert Species (optional)")]
AlertDateFrom = Annotated[str | None, FieldKind.TEXT, Field(
    description="Date from (optional, YYYY-MM-DD)", json_schema_extra={"format": "YYYY-MM-DD"},
)]
AlertDateTo = Annotated[str | None, FieldKind.TEXT, Field(
    description="Date to (optional, YYYY-MM-DD)", json_schema_extra={"format": "YYYY-MM-DD"},
)]
SortOrder = Annotated[Literal["asc", "desc"] | None, FieldKind.ENUM]
OrderByDate = Annotated[SortOrder, Field(description="Order by date (optional)")]
OrderByAdv = Annotated[SortOrder, Field(description="Order by adverse event (optional)")]

# Filters forwarded by the masterview tools, in query order
MASTERVIEW_FILTERS: tuple[str, ...] = (
    "adverse_event_id", "ref_source_type", "alert_type", "alert_phase", "alert_level_evidence",
    "alert_severity", "alert_causality", "alert_species", "alert_date_from", "alert_date_to",
)
TARGET_MASTERVIEW_FILTERS: tuple[str, ...] = (
    *MASTERVIEW_FILTERS[:5], "alert_onoff_target", *MASTERVIEW_FILTERS[5:],
)
