"""Field rules and validators for tool parameters.

Every tool declares its arguments as a `ToolParams` model. Each field is tagged
with a `FieldKind` in its `Annotated` metadata; the model derives one
`FieldRule` per field and applies the kind's validator to the raw argument bag
before pydantic sees it. Combination rules live on the concrete models as
`model_validator(mode="after")`, so a field-level failure always wins.

Example:
    >>> class ScoreParams(ToolParams):
    ...     drug_id: Annotated[str | None, FieldKind.NUMBER_LIST] = None
    >>> ScoreParams.parse("get_score", {"drug_id": "1,x"})
    Traceback (most recent call last):
    InvalidArgument: drug_id must be a number or a comma-separated list of numbers (e.g., 1,2,3)
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Literal, Self, get_args, get_origin

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.fields import FieldInfo

from ..errors import InvalidArgument, JsonDict

# Raised by the bare validators; the tool boundary rebinds the real tool name
_UNBOUND = "arguments"

_NUMBER_LIST = re.compile(r"\d+(,\d+)*", re.ASCII)


class FieldKind(StrEnum):
    """Value shape accepted by a parameter."""
    TEXT = "text"
    NUMBER = "number"
    NUMBER_LIST = "number_list"
    ENUM = "enum"


# ═══════════════════════════════════════════════════════════════════════════════
# Validators
# ═══════════════════════════════════════════════════════════════════════════════


def is_present(value: object) -> bool:
    """Supplied and non-empty: neither None nor the empty string."""
    return value is not None and value != ""


def invalid(message: str) -> InvalidArgument:
    """InvalidArgument for raising inside validators; the tool boundary rebinds the tool name."""
    return InvalidArgument.create(_UNBOUND, message)


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def validate_comma_separated_numbers(value: object, field_name: str) -> None:
    """Pass when absent, a number, or a string like `1` / `1,2,3`."""
    if not is_present(value) or _is_number(value):
        return
    if isinstance(value, str) and _NUMBER_LIST.fullmatch(value):
        return
    raise invalid(f"{field_name} must be a number or a comma-separated list of numbers (e.g., 1,2,3)")


def validate_string_enum(value: object, field_name: str, allowed: tuple[str, ...] | list[str]) -> None:
    """Pass when absent or one of `allowed`."""
    if not is_present(value):
        return
    if not isinstance(value, str) or value not in allowed:
        raise invalid(f"{field_name} must be one of: {', '.join(allowed)}")


def validate_number(value: object, field_name: str) -> None:
    """Pass when absent or numeric. Booleans are not numbers."""
    if is_present(value) and not _is_number(value):
        raise invalid(f"{field_name} must be a number")


# ═══════════════════════════════════════════════════════════════════════════════
# Field Rules
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Shape constraint for one parameter."""

    field_name: str
    kind: FieldKind
    allowed_values: tuple[str, ...] = ()
    required: bool = False

    def check(self, value: object) -> None:
        match self.kind:
            case FieldKind.NUMBER_LIST: validate_comma_separated_numbers(value, self.field_name)
            case FieldKind.ENUM: validate_string_enum(value, self.field_name, self.allowed_values)
            case FieldKind.NUMBER: validate_number(value, self.field_name)
            case FieldKind.TEXT: pass

    @property
    def json_type(self) -> str:
        return "number" if self.kind is FieldKind.NUMBER else "string"

    @classmethod
    def from_field(cls, name: str, info: FieldInfo) -> Self:
        kind = next((m for m in info.metadata if isinstance(m, FieldKind)), FieldKind.TEXT)
        allowed = _literal_values(info.annotation) if kind is FieldKind.ENUM else ()
        return cls(name, kind, allowed, info.is_required())


def _literal_values(annotation: Any) -> tuple[str, ...]:
    """Collect Literal members from `Literal[...]` or `Literal[...] | None`."""
    if get_origin(annotation) is Literal:
        return tuple(str(v) for v in get_args(annotation))
    return tuple(v for arg in get_args(annotation) for v in _literal_values(arg))


def _canonical(value: object) -> object:
    """Render numbers the way they appear in a query string (2.0 -> "2")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value) if _is_number(value) else value


# ═══════════════════════════════════════════════════════════════════════════════
# Parameter Model Base
# ═══════════════════════════════════════════════════════════════════════════════


class ToolParams(BaseModel):
    """Base for per-tool argument models.

    Absent values (None or "") are dropped before validation so field defaults
    apply. Rules run in declaration order; then required fields are checked.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    field_rules: ClassVar[tuple[FieldRule, ...]] = ()
    # oneOf/anyOf fragment describing the combination rule for discovery
    combination_schema: ClassVar[JsonDict] = {}

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.field_rules = tuple(FieldRule.from_field(name, info) for name, info in cls.model_fields.items())

    @model_validator(mode="before")
    @classmethod
    def _check_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = {k: v for k, v in data.items() if is_present(v)}
        for rule in cls.field_rules:
            if (value := data.get(rule.field_name)) is None:
                continue
            rule.check(value)
            if rule.kind is not FieldKind.NUMBER:
                data[rule.field_name] = _canonical(value)
        for rule in cls.field_rules:
            if rule.required and rule.field_name not in data:
                raise invalid(f"{rule.field_name} is required")
        return data

    @classmethod
    def parse(cls, tool_name: str, arguments: Mapping[str, object] | None) -> Self:
        """Validate a raw argument bag, raising InvalidArgument for `tool_name`."""
        try:
            return cls.model_validate(dict(arguments or {}))
        except ValidationError as e:
            raise InvalidArgument.from_validation_error(tool_name, e) from e

    def has(self, *names: str) -> bool:
        """True when every named field was supplied."""
        return all(getattr(self, n) is not None for n in names)

    def query(self, *names: str) -> list[tuple[str, str]]:
        """Stringified pairs for supplied fields, in `names` order (default: declaration order)."""
        return [(n, str(v)) for n in (names or tuple(type(self).model_fields)) if (v := getattr(self, n)) is not None]

    # ─────────────────────────────────────────────────────────────────
    # Discovery
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def property_schema(cls, rule: FieldRule) -> JsonDict:
        """JSON-schema property for one field, carrying its documentation extras."""
        info = cls.model_fields[rule.field_name]
        entry: JsonDict = {"type": rule.json_type, "description": info.description or ""}
        if rule.allowed_values:
            entry["enum"] = list(rule.allowed_values)
        if isinstance(info.json_schema_extra, dict):
            entry.update(info.json_schema_extra)
        if info.examples:
            entry["examples"] = list(info.examples)
        if not rule.required and info.default is not None:
            entry["default"] = info.default
        return entry

    @classmethod
    def input_schema(cls) -> JsonDict:
        """MCP `inputSchema`: properties, required fields and the combination rule."""
        schema: JsonDict = {
            "type": "object",
            "properties": {r.field_name: cls.property_schema(r) for r in cls.field_rules},
        }
        if required := [r.field_name for r in cls.field_rules if r.required]:
            schema["required"] = required
        return {**schema, **cls.combination_schema}

    @classmethod
    def field_summaries(cls) -> list[JsonDict]:
        """Flat `[{name, type, description, ...}]` list served by the HTTP front-end."""
        return [{"name": r.field_name, **cls.property_schema(r)} for r in cls.field_rules]
