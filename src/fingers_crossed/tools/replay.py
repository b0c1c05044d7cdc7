"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fingers_crossed.core.config import resolve_settings
from fingers_crossed.core.models import Record
from fingers_crossed.core.replay import replay

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000
DEFAULT_BUFFER_LIMIT = 50


def _record_to_dict(record: Record) -> dict[str, Any]:
    """Convert a Record into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "datetime": record.datetime.isoformat(),
        "channel": record.channel,
        "level": record.level.name.lower(),
        "message": record.message,
    }
    line_no = record.extra.get("line_no")
    if line_no is not None:
        d["line_no"] = line_no
    if record.context:
        d["context"] = record.context
    return d


async def replay_logs_impl(
    *,
    log_path: str,
    action_level: str | None = None,
    channel_levels: Mapping[str, str] | None = None,
    buffer_limit: int | None = None,
    passthrough_level: str | None = None,
    stop_buffering: bool = False,
    contains: str | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `replay_logs` MCP tool.

    Notes
    -----
    - Environment settings (FINGERS_CROSSED_*) are the base; explicit
      arguments override them.
    - stop_buffering defaults to False so each activation releases only the
      burst that led to it.
    - Records are returned in release order, capped at `limit`.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    settings = resolve_settings().with_overrides(
        action_level=action_level,
        channel_levels=dict(channel_levels) if channel_levels else None,
        buffer_limit=DEFAULT_BUFFER_LIMIT if buffer_limit is None else buffer_limit,
        passthrough_level=passthrough_level,
        stop_buffering=stop_buffering,
    )

    result = await replay(log_path, settings, contains=contains)
    records = result.records[:limit]
    return {
        "count": len(records),
        "total": result.total,
        "activations": result.activations,
        "truncated": len(result.records) > len(records),
        "records": [_record_to_dict(r) for r in records],
    }
