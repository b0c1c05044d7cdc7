"""Record formatting."""

from __future__ import annotations

import datetime as dt
import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from .models import Record

SIMPLE_FORMAT = "[%datetime%] %channel%.%level_name%: %message% %context% %extra%"
SIMPLE_DATE = "%Y-%m-%dT%H:%M:%S.%f%z"

_TOKEN_RE = re.compile(r"%(\w+)%")


class Formatter(Protocol):
    """Formatter interface: turn a record into text."""

    def format(self, record: Record) -> str:
        """Return the text representation of a record."""
        ...


def _json_default(value: object) -> Any:
    if isinstance(value, dt.datetime):
        return value.isoformat()
    if isinstance(value, BaseException):
        return f"[object {type(value).__name__}] {value}"
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return f"[object {type(value).__name__}]"


def to_json(value: Any) -> str:
    return json.dumps(value, default=_json_default, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class LineFormatter:
    """Format a record as a single line using ``%placeholder%`` tokens."""

    template: str = SIMPLE_FORMAT
    date_format: str = SIMPLE_DATE
    allow_inline_line_breaks: bool = False
    ignore_empty_context_and_extra: bool = False

    @staticmethod
    def _stringify_map(value: Mapping[str, Any]) -> str:
        if not value:
            return "[]"
        return to_json(dict(value))

    def _message(self, message: str) -> str:
        if self.allow_inline_line_breaks:
            return message
        return message.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")

    def format(self, record: Record) -> str:
        """Render the template for a record."""
        values = {
            "datetime": record.datetime.strftime(self.date_format),
            "channel": record.channel,
            "level_name": record.level.name,
            "level": str(int(record.level)),
            "message": self._message(record.message),
            "context": self._stringify_map(record.context),
            "extra": self._stringify_map(record.extra),
        }
        out = self.template
        if self.ignore_empty_context_and_extra:
            for key in ("context", "extra"):
                if not getattr(record, key):
                    out = out.replace(f" %{key}%", "").replace(f"%{key}%", "")
        # Substituted values are never rescanned for tokens.
        out = _TOKEN_RE.sub(lambda m: values.get(m.group(1), m.group(0)), out)
        return out.rstrip()
