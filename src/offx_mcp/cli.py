"""Process entry point: `offx-mcp-server` / `python -m offx_mcp`.

Configuration comes from the environment only (see OffxSettings). The process
serves exactly one front-end: plain HTTP when USE_HTTP is set, MCP otherwise.
"""

from __future__ import annotations

import sys

from pydantic import ValidationError

from offx_mcp.ext.mcp import Dispatcher, serve_http, serve_mcp
from offx_mcp.foundation.config import OffxSettings, get_settings
from offx_mcp.io import OffxClient
from offx_mcp.runtime.logging import configure_logging, get_logger
from offx_mcp.tools import create_registry

_MISSING_TOKEN = "Missing required environment variable: OFFX_API_TOKEN"
_TOKEN_LOCS = (("OFFX_API_TOKEN",), ("api_token",))


def _startup_error(e: ValidationError) -> str:
    """Name the missing token plainly; other settings errors keep pydantic's wording."""
    if any(err.get("loc", ())[:1] in _TOKEN_LOCS for err in e.errors()):
        return _MISSING_TOKEN
    return f"Invalid configuration: {e}"


def load_settings() -> OffxSettings:
    """Load settings or exit with status 1."""
    try:
        return get_settings()
    except ValidationError as e:
        configure_logging("console", "ERROR")
        get_logger("offx").error(_startup_error(e))
        sys.exit(1)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_format, settings.log_level)
    log = get_logger("offx")

    client = OffxClient(settings)
    dispatcher = Dispatcher(create_registry(client))
    log.info("starting", mode=settings.mode, base_url=settings.api_base_url, tools=len(dispatcher.registry))

    if settings.use_http:
        serve_http(
            dispatcher,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            on_shutdown=client.aclose,
        )
    else:
        serve_mcp(
            dispatcher,
            transport=settings.transport,
            host=settings.host,
            port=settings.port,
            path=settings.sse_path,
            on_shutdown=client.aclose,
        )


if __name__ == "__main__":
    main()
