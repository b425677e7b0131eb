"""Standardized error handling for OFF-X tools.

Provides error codes, a structured error model and the exception hierarchy
shared by both front-ends. Each exception knows how it maps onto the MCP
error object (JSON-RPC code) and onto the plain HTTP response (status code),
so the dispatchers never inspect messages to classify failures.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, ClassVar, Self

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for tool failures."""
    INVALID_PARAMS = "INVALID_PARAMS"
    NOT_FOUND = "NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UNKNOWN = "UNKNOWN"


class ToolError(BaseModel):
    """Structured error response for tool failures.

    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        code: Machine-readable error code for programmatic handling
        details: Optional detailed information (e.g., upstream body)
    """

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        json_schema_extra={
            "title": "Tool Error",
            "description": "Structured error from tool execution",
            "examples": [{
                "tool_name": "get_alerts",
                "message": "You must provide exactly one of: drug_id or target_id",
                "code": "INVALID_PARAMS",
            }],
        },
    )

    tool_name: Annotated[str, Field(
        min_length=1,
        description="Name of the tool that produced the error",
    )]
    message: Annotated[str, Field(
        min_length=1,
        description="Human-readable error message",
    )]
    code: ErrorCode = Field(
        default=ErrorCode.UNKNOWN,
        description="Machine-readable error classification",
    )
    details: str | None = Field(
        default=None,
        description="Optional detailed error info",
    )

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @classmethod
    def create(
        cls,
        tool_name: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        details: str | None = None,
    ) -> Self:
        """Factory method for construction."""
        return cls(tool_name=tool_name, message=message, code=code, details=details)


class ToolException(Exception):
    """Exception wrapping a ToolError for raising.

    Subclasses pin the error code and its transport mappings:
    `mcp_code` is the JSON-RPC error code, `http_status` the HTTP status.
    """

    __slots__ = ("error",)

    default_code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN
    mcp_code: ClassVar[int] = INTERNAL_ERROR
    http_status: ClassVar[int] = 500

    def __init__(self, error: ToolError) -> None:
        self.error = error
        super().__init__(error.message)

    @classmethod
    def create(cls, tool_name: str, message: str, code: ErrorCode | None = None, *, details: str | None = None) -> Self:
        """Create tool exception."""
        return cls(ToolError(tool_name=tool_name, message=message, code=code or cls.default_code, details=details))

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    def to_payload(self) -> dict[str, object]:
        """HTTP error body: `{"error": message, "code": status}`."""
        return {"error": self.error.message, "code": self.http_status}


class InvalidArgument(ToolException, ValueError):
    """A field failed format/enum validation or a combination rule was violated.

    Also a ValueError, so raising it inside a pydantic validator surfaces as a
    ValidationError whose context carries this exception.
    """

    __slots__ = ()

    default_code = ErrorCode.INVALID_PARAMS
    mcp_code = INVALID_PARAMS
    http_status = 400

    @classmethod
    def from_validation_error(cls, tool_name: str, exc: ValidationError) -> Self:
        return cls.create(tool_name, format_validation_error(exc))


class MethodNotFound(ToolException):
    """Unknown tool name or route."""

    __slots__ = ()

    default_code = ErrorCode.NOT_FOUND
    mcp_code = METHOD_NOT_FOUND
    http_status = 404


class UpstreamError(ToolException):
    """The OFF-X API answered non-2xx, or could not be reached or decoded.

    `status_code` and `body` are set when the API answered; they are None for
    network, timeout and decoding failures (the cause is chained instead).
    """

    __slots__ = ("status_code", "body")

    default_code = ErrorCode.EXTERNAL_SERVICE_ERROR
    mcp_code = INTERNAL_ERROR
    http_status = 500

    def __init__(self, error: ToolError, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, tool_name: str, status_code: int, body: str) -> Self:
        """Build from a non-2xx upstream answer; message keeps status and raw body."""
        error = ToolError(
            tool_name=tool_name,
            message=f"Request failed with status {status_code}: {body}",
            code=ErrorCode.EXTERNAL_SERVICE_ERROR,
        )
        return cls(error, status_code=status_code, body=body)


def format_validation_error(exc: ValidationError) -> str:
    """Collapse a pydantic ValidationError into one message for the caller.

    Validator-raised ValueErrors keep their own message (they already name the
    field); missing fields read `<field> is required`; anything else is
    prefixed with the field path.
    """
    messages: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        if (cause := err.get("ctx", {}).get("error")) is not None:
            messages.append(str(cause))
        elif err.get("type") == "missing":
            messages.append(f"{loc} is required")
        else:
            messages.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else str(err.get("msg")))
    # Deduplicate while keeping order (union members can repeat a message)
    return "; ".join(dict.fromkeys(messages)) or "Invalid arguments"
