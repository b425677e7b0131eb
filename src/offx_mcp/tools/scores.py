"""Risk score for a drug, or for a target/class (target_id + action_id)."""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import Field, model_validator

from offx_mcp.foundation.core import BaseTool, ToolExample, ToolMetadata, ToolParams, invalid
from offx_mcp.io import UpstreamRequest

from .filters import ActionId, AdverseEventId, DrugId, TargetId

DRUG_SCORE_PATH = "/score/drug/search/param"
TARGET_SCORE_PATH = "/score/target/search/param"


class ScoreParams(ToolParams):
    combination_schema = {
        "oneOf": [
            {"required": ["drug_id"], "not": {"anyOf": [{"required": ["target_id"]}, {"required": ["action_id"]}]}},
            {"required": ["target_id", "action_id"], "not": {"required": ["drug_id"]}},
        ],
    }

    drug_id: Annotated[DrugId, Field(description="Drug identifier (OFFX drug_id, required for drug score)")] = None
    adverse_event_id: Annotated[AdverseEventId, Field(description="Adverse event identifier (optional)")] = None
    target_id: Annotated[TargetId, Field(
        description="Target identifier (OFFX target_id, required for target/class score)",
    )] = None
    action_id: Annotated[ActionId, Field(
        description="Action identifier (OFFX action_id, required for target/class score)",
    )] = None

    @model_validator(mode="after")
    def _one_subject(self) -> Self:
        drug_only = self.drug_id is not None and self.target_id is None and self.action_id is None
        target_pair = self.drug_id is None and self.has("target_id", "action_id")
        if not (drug_only or target_pair):
            raise invalid(
                "You must provide either drug_id (alone), or both target_id and action_id (together), "
                "but not neither, not all, and not just one of target_id/action_id"
            )
        return self

    @property
    def is_drug_score(self) -> bool:
        return self.drug_id is not None


class GetScore(BaseTool[ScoreParams]):
    """Drug score or target/class score; adverse_event_id narrows either."""

    metadata = ToolMetadata(
        name="get_score",
        description=(
            "Get a risk/score value for a drug (by drug_id) or for a target/class (by target_id and "
            "action_id). Optionally filter by adverse_event_id. Returns a numeric score representing "
            "risk or association."
        ),
        category="scores",
        examples=(
            ToolExample(description="Get drug_score by drug id", usage={"drug_id": "99402"}),
            ToolExample(
                description="Get drug_score by drug id and adverse event id",
                usage={"drug_id": "99402", "adverse_event_id": "10001551"},
            ),
            ToolExample(
                description="Get target/class score by target id and action id",
                usage={"target_id": "158", "action_id": "15"},
            ),
            ToolExample(
                description="Get target/class score by target id, action id, and adverse event id",
                usage={"target_id": "158", "action_id": "15", "adverse_event_id": "10001551"},
            ),
        ),
    )
    params_schema = ScoreParams

    def build(self, params: ScoreParams) -> UpstreamRequest:
        if params.is_drug_score:
            return UpstreamRequest(DRUG_SCORE_PATH, params.query("drug_id", "adverse_event_id"))
        return UpstreamRequest(TARGET_SCORE_PATH, params.query("target_id", "action_id", "adverse_event_id"))
