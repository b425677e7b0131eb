"""Tests for field validators, parameter models and combination rules."""

from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from offx_mcp.foundation.core import (
    FieldKind,
    FieldRule,
    validate_comma_separated_numbers,
    validate_number,
    validate_string_enum,
)
from offx_mcp.foundation.errors import ErrorCode, InvalidArgument
from offx_mcp.tools.adverse_events import AdverseEventsParams, SearchAdverseEventsParams
from offx_mcp.tools.alerts import AlertsParams
from offx_mcp.tools.drugs import DrugMasterviewParams, GetDrugsParams, SearchDrugsParams
from offx_mcp.tools.scores import ScoreParams
from offx_mcp.tools.targets import TargetMasterviewParams, TargetsParams

NUMBER_LIST_MESSAGE = "must be a number or a comma-separated list of numbers (e.g., 1,2,3)"


# ─────────────────────────────────────────────────────────────────────────────
# Bare validators
# ─────────────────────────────────────────────────────────────────────────────


class TestCommaSeparatedNumbers:
    """Numeric-or-list fields."""

    @pytest.mark.parametrize("value", [None, "", 5, 2.5, "1", "1,2", "10,20,30", "007"])
    def test_accepts(self, value: object) -> None:
        """Absent values, numbers and digit lists pass."""
        validate_comma_separated_numbers(value, "alert_type")

    @pytest.mark.parametrize("value", ["12a", "1,,2", "-1", "1,", ",1", "1, 2", " 1", "1.5", "١٢", True, ["1"]])
    def test_rejects(self, value: object) -> None:
        """Anything else fails, naming the field."""
        with pytest.raises(InvalidArgument, match="alert_type must be a number or a comma-separated list"):
            validate_comma_separated_numbers(value, "alert_type")

    def test_error_code(self) -> None:
        """Validator failures carry INVALID_PARAMS."""
        with pytest.raises(InvalidArgument) as exc_info:
            validate_comma_separated_numbers("x", "drug_id")
        assert exc_info.value.code is ErrorCode.INVALID_PARAMS
        assert exc_info.value.message == f"drug_id {NUMBER_LIST_MESSAGE}"


class TestStringEnum:
    def test_accepts_members_and_absent(self) -> None:
        for value in (None, "", "asc", "desc"):
            validate_string_enum(value, "order_by_date", ("asc", "desc"))

    def test_rejects_with_allowed_list(self) -> None:
        """Case matters; message lists the allowed values."""
        with pytest.raises(InvalidArgument, match="^order_by_date must be one of: asc, desc$"):
            validate_string_enum("ASC", "order_by_date", ("asc", "desc"))

    def test_rejects_non_string(self) -> None:
        with pytest.raises(InvalidArgument):
            validate_string_enum(1, "alert_severity", ["yes", "no"])


class TestNumber:
    def test_accepts(self) -> None:
        for value in (None, "", 0, 3, 2.0):
            validate_number(value, "page")

    @pytest.mark.parametrize("value", ["3", True, False, [1]])
    def test_rejects(self, value: object) -> None:
        """Booleans and numeric strings are not numbers."""
        with pytest.raises(InvalidArgument, match="^page must be a number$"):
            validate_number(value, "page")


# ─────────────────────────────────────────────────────────────────────────────
# Field rules
# ─────────────────────────────────────────────────────────────────────────────


class TestFieldRules:
    def test_rules_follow_declaration_order(self) -> None:
        assert [r.field_name for r in GetDrugsParams.field_rules] == ["target_id", "action_id", "adverse_event_id", "page"]

    def test_kinds_and_requirements(self) -> None:
        rules = {r.field_name: r for r in DrugMasterviewParams.field_rules}
        assert rules["drug_id"] == FieldRule("drug_id", FieldKind.NUMBER_LIST, (), True)
        assert rules["page"].kind is FieldKind.NUMBER and rules["page"].required
        assert rules["alert_severity"].allowed_values == ("yes", "no")
        assert rules["alert_causality"].kind is FieldKind.TEXT
        assert not rules["adverse_event_id"].required

    def test_enum_rule_from_literal_with_default(self) -> None:
        rules = {r.field_name: r for r in TargetsParams.field_rules}
        assert rules["type"].kind is FieldKind.ENUM
        assert rules["type"].allowed_values == ("primary", "secondary")
        assert not rules["type"].required

    def test_order_by_enums(self) -> None:
        rules = {r.field_name: r for r in AlertsParams.field_rules}
        assert rules["order_by_date"].allowed_values == ("asc", "desc")
        assert rules["order_by_adv"].allowed_values == ("asc", "desc")


# ─────────────────────────────────────────────────────────────────────────────
# Parameter models
# ─────────────────────────────────────────────────────────────────────────────


class TestToolParams:
    def test_missing_required_field(self) -> None:
        with pytest.raises(InvalidArgument, match="^drug is required$") as exc_info:
            SearchDrugsParams.parse("search_drugs", {})
        assert exc_info.value.error.tool_name == "search_drugs"

    def test_empty_string_counts_as_absent(self) -> None:
        with pytest.raises(InvalidArgument, match="^drug is required$"):
            SearchDrugsParams.parse("search_drugs", {"drug": ""})

    def test_none_arguments(self) -> None:
        with pytest.raises(InvalidArgument, match="target_id and action_id"):
            GetDrugsParams.parse("get_drugs", None)

    def test_numbers_are_stringified(self) -> None:
        params = ScoreParams.parse("get_score", {"drug_id": 99402, "adverse_event_id": 10001551.0})
        assert params.drug_id == "99402"
        assert params.query("drug_id", "adverse_event_id") == [("drug_id", "99402"), ("adverse_event_id", "10001551")]

    def test_text_fields_accept_numbers(self) -> None:
        assert SearchDrugsParams.parse("search_drugs", {"drug": 42}).drug == "42"

    def test_unknown_keys_ignored(self) -> None:
        params = SearchDrugsParams.parse("search_drugs", {"drug": "everolimus", "token": "sneaky"})
        assert params.query() == [("drug", "everolimus")]

    def test_page_defaults_to_one(self) -> None:
        params = GetDrugsParams.parse("get_drugs", {"adverse_event_id": "10001551"})
        assert params.page == 1

    def test_page_zero_is_kept(self) -> None:
        params = AlertsParams.parse("get_alerts", {"drug_id": "1", "page": 0})
        assert ("page", "0") in params.query()

    def test_page_must_be_numeric(self) -> None:
        with pytest.raises(InvalidArgument, match="^page must be a number$"):
            AlertsParams.parse("get_alerts", {"drug_id": "1", "page": "2"})

    def test_field_failure_wins_over_combination(self) -> None:
        """Both ids set violates the rule, but the malformed id is reported."""
        with pytest.raises(InvalidArgument, match=re.escape(f"drug_id {NUMBER_LIST_MESSAGE}")):
            AlertsParams.parse("get_alerts", {"drug_id": "12a", "target_id": "158"})

    def test_filter_failure_wins_over_combination(self) -> None:
        with pytest.raises(InvalidArgument, match="^alert_severity must be one of: yes, no$"):
            AlertsParams.parse("get_alerts", {"alert_severity": "maybe"})

    def test_models_are_frozen(self) -> None:
        params = SearchDrugsParams.parse("search_drugs", {"drug": "x"})
        with pytest.raises(ValidationError):
            params.drug = "y"  # type: ignore[misc]


# ─────────────────────────────────────────────────────────────────────────────
# Combination rules
# ─────────────────────────────────────────────────────────────────────────────


GET_DRUGS_RULE = "You must provide either both target_id and action_id, or only adverse_event_id"
SCORE_RULE = "You must provide either drug_id (alone), or both target_id and action_id (together)"


class TestCombinationRules:
    @pytest.mark.parametrize("args", [
        {"target_id": "123", "action_id": "456"},
        {"adverse_event_id": "10001551"},
    ])
    def test_get_drugs_allowed(self, args: dict[str, object]) -> None:
        GetDrugsParams.parse("get_drugs", args)

    @pytest.mark.parametrize("args", [
        {},
        {"target_id": "123"},
        {"action_id": "456"},
        {"target_id": "123", "action_id": "456", "adverse_event_id": "1"},
        {"target_id": "123", "adverse_event_id": "1"},
    ])
    def test_get_drugs_rejected(self, args: dict[str, object]) -> None:
        with pytest.raises(InvalidArgument, match=f"^{GET_DRUGS_RULE}$"):
            GetDrugsParams.parse("get_drugs", args)

    @pytest.mark.parametrize("args", [{}, {"drug_id": "1", "target_id": "2"}, {"drug_id": "", "target_id": ""}])
    def test_alerts_exactly_one_subject(self, args: dict[str, object]) -> None:
        with pytest.raises(InvalidArgument, match="^You must provide exactly one of: drug_id or target_id$"):
            AlertsParams.parse("get_alerts", args)

    @pytest.mark.parametrize("args", [
        {"drug_id": "99402"},
        {"drug_id": "99402", "adverse_event_id": "10001551"},
        {"target_id": "158", "action_id": "15"},
        {"target_id": "158", "action_id": "15", "adverse_event_id": "10001551"},
    ])
    def test_score_allowed(self, args: dict[str, object]) -> None:
        ScoreParams.parse("get_score", args)

    @pytest.mark.parametrize("args", [
        {},
        {"drug_id": "99402", "target_id": "158"},
        {"drug_id": "99402", "action_id": "15"},
        {"target_id": "158"},
        {"action_id": "15"},
        {"adverse_event_id": "10001551"},
        {"drug_id": "99402", "target_id": "158", "action_id": "15"},
    ])
    def test_score_rejected(self, args: dict[str, object]) -> None:
        with pytest.raises(InvalidArgument, match=re.escape(SCORE_RULE)):
            ScoreParams.parse("get_score", args)

    def test_adverse_events_exactly_one(self) -> None:
        AdverseEventsParams.parse("get_adverse_events", {"target_id": "158"})
        with pytest.raises(InvalidArgument, match="^You must provide exactly one of: drug_id or target_id$"):
            AdverseEventsParams.parse("get_adverse_events", {"drug_id": "1", "target_id": "2"})

    def test_search_adverse_event_is_required(self) -> None:
        with pytest.raises(InvalidArgument, match="^adverse_event is required$"):
            SearchAdverseEventsParams.parse("search_adverse_events", {"adverse_event": None})

    def test_search_adverse_event_short_names_pass(self) -> None:
        """The 3-character minimum is advisory; the API decides."""
        assert SearchAdverseEventsParams.parse("search_adverse_events", {"adverse_event": "an"}).adverse_event == "an"

    @pytest.mark.parametrize("missing", ["target_id", "action_id", "page"])
    def test_target_masterview_requires_all(self, missing: str) -> None:
        args = {"target_id": "158", "action_id": "15", "page": 1}
        del args[missing]
        with pytest.raises(InvalidArgument, match=f"^{missing} is required$"):
            TargetMasterviewParams.parse("get_target", args)

    def test_drug_masterview_requires_page(self) -> None:
        with pytest.raises(InvalidArgument, match="^page is required$"):
            DrugMasterviewParams.parse("get_drug", {"drug_id": "11204"})

    def test_targets_exactly_one_subject(self) -> None:
        with pytest.raises(InvalidArgument, match="^You must provide exactly one of: drug_id or adverse_event_id$"):
            TargetsParams.parse("get_targets", {"drug_id": "1", "adverse_event_id": "2"})
        with pytest.raises(InvalidArgument, match="^You must provide exactly one of: drug_id or adverse_event_id$"):
            TargetsParams.parse("get_targets", {"type": "secondary"})

    def test_targets_type_enum(self) -> None:
        with pytest.raises(InvalidArgument, match="^type must be one of: primary, secondary$"):
            TargetsParams.parse("get_targets", {"drug_id": "1", "type": "tertiary"})

    def test_targets_type_checked_without_drug(self) -> None:
        """`type` only routes drug lookups, but a bad value is rejected on either branch."""
        with pytest.raises(InvalidArgument, match="^type must be one of: primary, secondary$"):
            TargetsParams.parse("get_targets", {"adverse_event_id": "10001551", "type": "x"})
        params = TargetsParams.parse("get_targets", {"adverse_event_id": "10001551", "type": "secondary"})
        assert params.result_key == "targets"

    def test_targets_result_key(self) -> None:
        assert TargetsParams.parse("get_targets", {"drug_id": "1"}).result_key == "primary_targets"
        assert TargetsParams.parse("get_targets", {"drug_id": "1", "type": "secondary"}).result_key == "secondary_targets"
        assert TargetsParams.parse("get_targets", {"adverse_event_id": "1"}).result_key == "targets"
