"""MCP server entrypoint (stdio transport).

Exposes the fingers-crossed replay as a tool: an MCP client asks for the
errors in a log file and gets each one together with the records that led up
to it.

Run locally (stdio):
    python -m fingers_crossed
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from fingers_crossed.tools.replay import replay_logs_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("FINGERS_CROSSED_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("fingers-crossed", json_response=True)


@mcp.tool()
async def replay_logs(
    log_path: str,
    action_level: str | None = None,
    channel_levels: dict[str, str] | None = None,
    buffer_limit: int | None = None,
    passthrough_level: str | None = None,
    stop_buffering: bool = False,
    contains: str | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Replay a log file and return only what a fingers-crossed handler releases.

    Parameters
    ----------
    log_path:
        Path to a local log file. Supports plain text and .gz.
    action_level:
        Level that activates the handler (e.g., "error", "warning"). Case-insensitive.
    channel_levels:
        Per-channel activation levels, e.g. {"sql": "warning"}.
    buffer_limit:
        How many records of context are kept before an activation (default 50).
    passthrough_level:
        Records at or above this level are returned even without activation.
    stop_buffering:
        When true, everything after the first activation is returned.
    contains:
        Substring filter applied to the raw line before parsing.
    limit:
        Maximum number of records returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"count": int, "total": int, "activations": int, "truncated": bool, "records": list[dict]}
    """
    return await replay_logs_impl(
        log_path=log_path,
        action_level=action_level,
        channel_levels=channel_levels,
        buffer_limit=buffer_limit,
        passthrough_level=passthrough_level,
        stop_buffering=stop_buffering,
        contains=contains,
        limit=limit,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
