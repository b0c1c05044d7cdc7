"""JSON-lines parser."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import Level, Record
from .base import build_record, parse_iso_timestamp


def _first(obj: dict, keys: Sequence[str]):
    for k in keys:
        if k in obj:
            return obj[k]
    return None


@dataclass(frozen=True, slots=True)
class JsonLinesParser:
    """Parse JSON-lines logs (one JSON object per line)."""

    time_keys: Sequence[str] = ("datetime", "timestamp", "time", "ts", "@timestamp")
    level_keys: Sequence[str] = ("level_name", "level", "severity", "lvl", "log_level")
    msg_keys: Sequence[str] = ("message", "msg", "error", "detail")
    channel_keys: Sequence[str] = ("channel", "logger", "name")
    default_level: Level = Level.INFO

    def _level(self, value: object) -> Level:
        if isinstance(value, str):
            return Level.from_name(value) or self.default_level
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return Level(value)
            except ValueError:
                return self.default_level
        return self.default_level

    def parse(self, line_no: int, line: str, *, channel: str) -> Record | None:
        """Parse a JSON object line into a Record."""
        s = line.strip()
        if not s or not (s.startswith("{") and s.endswith("}")):
            return None

        try:
            obj = json.loads(s)
        except json.JSONDecodeError:
            return None
        if not isinstance(obj, dict):
            return None

        ts_val = _first(obj, self.time_keys)
        ts = parse_iso_timestamp(ts_val) if isinstance(ts_val, str) else None

        msg_val = _first(obj, self.msg_keys)
        chan_val = _first(obj, self.channel_keys)
        context = obj.get("context")
        extra = obj.get("extra")

        return build_record(
            line_no=line_no,
            channel=str(chan_val) if chan_val else channel,
            level=self._level(_first(obj, self.level_keys)),
            message=str(msg_val) if msg_val is not None else s,
            timestamp=ts,
            context=context if isinstance(context, dict) else None,
            extra=extra if isinstance(extra, dict) else None,
        )
