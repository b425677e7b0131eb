"""Environment-based configuration using pydantic-settings.

One `OffxSettings` instance is built at startup and handed to the upstream
client, the dispatcher and the servers. Nothing else reads the environment.

Example:
    >>> from offx_mcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.port
    3000

    # Environment variables (unprefixed names kept for existing deployments):
    # OFFX_API_TOKEN=...        required
    # USE_HTTP=true             serve plain HTTP instead of MCP
    # PORT=3000
    # LOG_LEVEL=debug
    # TRANSPORT=stdio           or sse / streamable-http
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, PositiveFloat, PositiveInt, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Transport = Literal["stdio", "sse", "streamable-http"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_API_BASE_URL = "https://api.targetsafety.info/api"


def _env(name: str) -> AliasChoices:
    """Accept both the bare variable and its OFFX_-prefixed form."""
    return AliasChoices(name, f"OFFX_{name}")


class OffxSettings(BaseSettings):
    """Root settings for the OFF-X gateway.

    The API token is mandatory; constructing settings without it raises a
    pydantic ValidationError, which the entry point treats as fatal.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        validate_default=True,
    )

    # Upstream API
    api_token: SecretStr = Field(
        validation_alias="OFFX_API_TOKEN",
        description="Token sent as the `token` query parameter",
    )
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        validation_alias="OFFX_API_BASE_URL",
        description="Base URL of the OFF-X REST API",
    )
    http_timeout: PositiveFloat = Field(
        default=30.0,
        validation_alias="OFFX_HTTP_TIMEOUT",
        description="Per-request upstream timeout in seconds",
    )

    # Serving
    use_http: bool = Field(default=False, validation_alias=_env("USE_HTTP"))
    host: str = Field(default="127.0.0.1", validation_alias=_env("HOST"))
    port: PositiveInt = Field(default=3000, validation_alias=_env("PORT"))
    transport: Transport = Field(default="stdio", validation_alias=_env("TRANSPORT"))
    sse_path: str = Field(default="/mcp", validation_alias=_env("SSE_PATH"))

    # Logging
    log_level: LogLevel = Field(default="INFO", validation_alias=_env("LOG_LEVEL"))
    log_format: Literal["console", "json", "none"] = Field(default="console", validation_alias=_env("LOG_FORMAT"))

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        """Accept any case and the `warn` shorthand."""
        if not isinstance(v, str):
            return v
        v = v.strip().upper()
        return "WARNING" if v == "WARN" else v

    @field_validator("api_token")
    @classmethod
    def _require_token(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("OFFX_API_TOKEN must not be empty")
        return v

    @field_validator("transport", "log_format", mode="before")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("api_base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @computed_field
    @property
    def mode(self) -> Literal["http", "mcp"]:
        """Which front-end this process serves."""
        return "http" if self.use_http else "mcp"


@lru_cache(maxsize=1)
def get_settings() -> OffxSettings:
    """Get the process settings (cached).

    Raises:
        pydantic.ValidationError: when OFFX_API_TOKEN is missing or a value is malformed
    """
    return OffxSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
