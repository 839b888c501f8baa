"""Weather tool server: NWS lookups exposed as MCP tools over stdio."""

from __future__ import annotations

import logging
import os

from weather_bridge.config import LOG_LEVEL_ENV, parse_log_level

from .tools import mcp

__all__ = ["mcp", "main"]

logger = logging.getLogger(__name__)


def main() -> None:
    # stdout carries the MCP stream; basicConfig logs to stderr and replaces
    # the handler FastMCP installs on construction.
    logging.basicConfig(
        level=parse_log_level(os.getenv(LOG_LEVEL_ENV)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    logger.info("Weather MCP Server running on stdio")
    mcp.run(transport="stdio")
