"""Error handling: codes, structured errors and the transport-mapped exceptions."""

from __future__ import annotations

from typing import Any, Union

from .errors import (
    ErrorCode,
    InvalidArgument,
    MethodNotFound,
    ToolError,
    ToolException,
    UpstreamError,
    format_validation_error,
)

# JSON type aliases - Any for recursive slots (upstream bodies are opaque)
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

__all__ = [
    "ErrorCode", "ToolError", "ToolException",
    "InvalidArgument", "MethodNotFound", "UpstreamError",
    "format_validation_error",
    "JsonPrimitive", "JsonValue", "JsonDict",
]
