"""Bracketed timestamp parser."""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import Level, Record
from .base import build_record

DEFAULT_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y/%m/%d %H:%M:%S",
    "%d-%m-%Y %H:%M:%S",
)
_EMPTY_MAPS = " [] []"  # empty context and extra as rendered by LineFormatter


@dataclass(frozen=True, slots=True)
class BracketTimestampParser:
    """Parse '<timestamp> [LEVEL] <message>' and '[<ts>] channel.LEVEL: msg' lines.

    The second form is what ``LineFormatter`` writes, so replayed output of
    this library round-trips channel and level.
    """

    timestamp_formats: Sequence[str] = DEFAULT_TIMESTAMP_FORMATS
    default_level: Level = Level.INFO

    _re = re.compile(r"^(?P<ts>.+?)\s+\[(?P<level>[A-Za-z]+)\]\s+(?P<msg>.*)$")
    _line_re = re.compile(
        r"^\[(?P<ts>[^\]]+)\]\s+(?P<channel>[\w.-]+?)\.(?P<level>[A-Z]+):\s(?P<msg>.*)$"
    )

    def _parse_ts(self, ts_str: str) -> dt.datetime | None:
        """Parse a timestamp string using the configured formats, then ISO8601."""
        for fmt in self.timestamp_formats:
            try:
                return dt.datetime.strptime(ts_str, fmt).replace(tzinfo=dt.UTC)
            except ValueError:
                continue
        try:
            ts = dt.datetime.fromisoformat(ts_str.replace("Z", "+00:00"))
        except ValueError:
            return None
        return ts if ts.tzinfo is not None else ts.replace(tzinfo=dt.UTC)

    def parse(self, line_no: int, line: str, *, channel: str) -> Record | None:
        """Parse a bracketed line into a Record."""
        m = self._line_re.match(line)
        if m:
            level = Level.from_name(m.group("level"))
            if level is not None:
                msg = m.group("msg").strip()
                if msg.endswith(_EMPTY_MAPS):
                    msg = msg[: -len(_EMPTY_MAPS)]
                return build_record(
                    line_no=line_no,
                    channel=m.group("channel"),
                    level=level,
                    message=msg,
                    timestamp=self._parse_ts(m.group("ts").strip()),
                )

        m = self._re.match(line)
        if not m:
            return None

        level = Level.from_name(m.group("level")) or self.default_level
        return build_record(
            line_no=line_no,
            channel=channel,
            level=level,
            message=m.group("msg").strip(),
            timestamp=self._parse_ts(m.group("ts").strip()),
        )
