"""Foundation - Core building blocks for the OFF-X gateway.

Contains: tool abstractions, field rules, error handling, registry, config.
"""

from __future__ import annotations

from .config import OffxSettings, clear_settings_cache, get_settings
from .core import BaseTool, FieldKind, FieldRule, ToolDescriptor, ToolExample, ToolMetadata, ToolParams
from .errors import ErrorCode, InvalidArgument, MethodNotFound, ToolError, ToolException, UpstreamError
from .registry import ToolRegistry

__all__ = [
    # Core
    "BaseTool", "ToolMetadata", "ToolDescriptor", "ToolExample", "ToolParams", "FieldKind", "FieldRule",
    # Errors
    "ErrorCode", "ToolError", "ToolException", "InvalidArgument", "MethodNotFound", "UpstreamError",
    # Registry
    "ToolRegistry",
    # Config
    "OffxSettings", "get_settings", "clear_settings_cache",
]
