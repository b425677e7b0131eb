"""Core tool abstractions: BaseTool, ToolMetadata and ToolDescriptor.

A tool pairs a typed parameter model with a request builder. Tools are
defined by subclassing BaseTool; both front-ends only ever see the
descriptor (for discovery) and `__call__` (for invocation).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..errors import JsonDict, JsonValue
from .fields import ToolParams

if TYPE_CHECKING:
    from offx_mcp.io import OffxClient, UpstreamRequest


class ToolExample(BaseModel):
    """One documented invocation shown to clients."""

    model_config = ConfigDict(frozen=True)

    description: str
    usage: JsonDict


class ToolMetadata(BaseModel):
    """Metadata describing a tool for discovery.

    Attributes:
        name: Unique identifier, also the HTTP path (snake_case, e.g., "get_alerts")
        description: What the tool does (shown to the model for tool selection)
        category: Grouping category ("drugs", "targets", "adverse_events", ...)
        examples: Usage examples surfaced with the descriptor
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[a-z][a-z0-9_]*$")
    description: str = Field(..., min_length=10)
    category: str = Field(default="general")
    examples: tuple[ToolExample, ...] = ()


class ToolDescriptor(BaseModel):
    """Immutable discovery record: name, documentation and input shape."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    category: str
    input_schema: JsonDict
    parameters: tuple[JsonDict, ...]
    examples: tuple[ToolExample, ...] = ()

    def summary(self) -> JsonDict:
        """Compact form served by `POST /list_tools`."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "schema": list(self.parameters),
        }


TParams = TypeVar("TParams", bound=ToolParams)


class BaseTool(ABC, Generic[TParams]):
    """Abstract base class for all OFF-X tools.

    Subclasses must:
    - Define `metadata` class variable with ToolMetadata
    - Define `params_schema` class variable with the ToolParams model
    - Implement `build(params)` returning the upstream request

    Tools that post-process the upstream body override `run`.

    Example:
        >>> class SearchTargets(BaseTool[SearchTargetsParams]):
        ...     metadata = ToolMetadata(name="search_targets", description="Search targets by name")
        ...     params_schema = SearchTargetsParams
        ...
        ...     def build(self, params: SearchTargetsParams) -> UpstreamRequest:
        ...         return UpstreamRequest("/target/search/param", params.query())
    """

    metadata: ClassVar[ToolMetadata]
    params_schema: ClassVar[type[ToolParams]]

    def __init__(self, client: OffxClient) -> None:
        self._client = client

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def bare_field(self) -> str | None:
        """The only field of a single-field tool, which may be called with a bare string."""
        fields = tuple(self.params_schema.model_fields)
        return fields[0] if len(fields) == 1 else None

    def parse(self, arguments: Mapping[str, object] | None) -> TParams:
        return self.params_schema.parse(self.name, arguments)  # type: ignore[return-value]

    @abstractmethod
    def build(self, params: TParams) -> UpstreamRequest:
        """Shape validated params into the upstream path and query."""
        ...

    async def run(self, params: TParams) -> JsonValue:
        """Issue the single upstream GET and return the decoded body."""
        return await self._client.get(self.name, self.build(params))

    async def __call__(self, arguments: Mapping[str, object] | None) -> JsonValue:
        return await self.run(self.parse(arguments))

    @classmethod
    def descriptor(cls) -> ToolDescriptor:
        schema = cls.params_schema
        return ToolDescriptor(
            name=cls.metadata.name,
            description=cls.metadata.description,
            category=cls.metadata.category,
            input_schema=schema.input_schema(),
            parameters=tuple(schema.field_summaries()),
            examples=cls.metadata.examples,
        )
