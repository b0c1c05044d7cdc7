"""Record processors.

A processor is any callable ``Record -> Record``. Processors never modify the
record they receive; they return a copy built with ``Record.with_``.
"""

from __future__ import annotations

import datetime as dt
import json
import re
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .errors import HandlerConfigError
from .models import Record

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z0-9_.]+)\}")


@dataclass(frozen=True, slots=True)
class PlaceholderProcessor:
    """Interpolate ``{key}`` placeholders in the message from the context."""

    date_format: str | None = None

    def _stringify(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, (str, int, float, bool)):
            return str(value)
        if isinstance(value, dt.datetime):
            if self.date_format:
                return value.strftime(self.date_format)
            return value.isoformat()
        if isinstance(value, (list, tuple, dict)):
            return "array" + json.dumps(value, default=str)
        return f"[object {type(value).__name__}]"

    def __call__(self, record: Record) -> Record:
        if "{" not in record.message:
            return record

        def substitute(m: re.Match[str]) -> str:
            key = m.group(1)
            if key not in record.context:
                return m.group(0)
            return self._stringify(record.context[key])

        return record.with_(message=_PLACEHOLDER_RE.sub(substitute, record.message))


@dataclass(frozen=True, slots=True)
class TagProcessor:
    """Add a list of tags to ``extra["tags"]``."""

    tags: Sequence[str] = ()

    def __call__(self, record: Record) -> Record:
        existing = list(record.extra.get("tags", ()))
        tags = existing + [t for t in self.tags if t not in existing]
        return record.with_(extra={**record.extra, "tags": tags})


class UidProcessor:
    """Add a random id to ``extra["uid"]``, stable until ``reset()``.

    Handy to correlate all records of one request.
    """

    def __init__(self, length: int = 7) -> None:
        if isinstance(length, bool) or not isinstance(length, int) or not 1 <= length <= 32:
            raise HandlerConfigError("The uid length must be an integer between 1 and 32")
        self._length = length
        self._uid = self._generate()

    def _generate(self) -> str:
        return uuid.uuid4().hex[: self._length]

    @property
    def uid(self) -> str:
        return self._uid

    def __call__(self, record: Record) -> Record:
        return record.with_(extra={**record.extra, "uid": self._uid})

    def reset(self) -> None:
        self._uid = self._generate()
