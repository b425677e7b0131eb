"""Core abstractions: tools, metadata, parameter models and field rules."""

from __future__ import annotations

from .base import BaseTool, ToolDescriptor, ToolExample, ToolMetadata
from .fields import (
    FieldKind,
    FieldRule,
    ToolParams,
    invalid,
    is_present,
    validate_comma_separated_numbers,
    validate_number,
    validate_string_enum,
)

__all__ = [
    "BaseTool", "ToolMetadata", "ToolDescriptor", "ToolExample",
    "FieldKind", "FieldRule", "ToolParams", "is_present", "invalid",
    "validate_comma_separated_numbers", "validate_string_enum", "validate_number",
]
