"""Parser interface and shared helpers."""

from __future__ import annotations

import datetime as dt
from typing import Protocol

from ..models import Level, Record


class RecordParser(Protocol):
    """Parser interface: return a Record if the line matches, else None.

    ``channel`` is the fallback channel for formats that do not carry one.
    """

    def parse(self, line_no: int, line: str, *, channel: str) -> Record | None:
        """Parse a log line into a Record if recognized."""
        ...


def parse_iso_timestamp(value: str) -> dt.datetime | None:
    """Parse an ISO8601 timestamp; naive values are taken as UTC."""
    try:
        ts = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=dt.UTC)
    return ts.astimezone(dt.UTC)


def build_record(
    *,
    line_no: int,
    channel: str,
    level: Level,
    message: str,
    timestamp: dt.datetime | None,
    context: dict | None = None,
    extra: dict | None = None,
) -> Record:
    """Create a Record for a parsed line, tagging it with its line number.

    Lines without a timestamp get the current time.
    """
    meta = {"line_no": line_no}
    if extra:
        meta.update(extra)
    kwargs = {}
    if timestamp is not None:
        kwargs["datetime"] = timestamp
    return Record(
        channel=channel,
        level=level,
        message=message,
        context=context or {},
        extra=meta,
        **kwargs,
    )
