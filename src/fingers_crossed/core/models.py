"""Core data models: severity levels and log records."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any

from .errors import HandlerConfigError

_LEVEL_ALIASES = {
    "WARN": "WARNING",
    "ERR": "ERROR",
    "CRIT": "CRITICAL",
    "FATAL": "CRITICAL",
    "SEVERE": "CRITICAL",
    "EMERG": "EMERGENCY",
    "PANIC": "EMERGENCY",
    "TRACE": "DEBUG",
}


class Level(IntEnum):
    """Severity levels, totally ordered from least to most severe."""

    DEBUG = 100
    INFO = 200
    NOTICE = 250
    WARNING = 300
    ERROR = 400
    CRITICAL = 500
    ALERT = 550
    EMERGENCY = 600

    @classmethod
    def from_name(cls, name: str) -> Level | None:
        """Return the level for a case-insensitive name or alias, else None."""
        key = name.strip().upper()
        key = _LEVEL_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            return None

    @classmethod
    def parse(cls, value: Level | int | str) -> Level:
        """Resolve a Level from an enum member, its integer value or its name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise HandlerConfigError(f"Invalid log level: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                valid = ", ".join(str(int(lvl)) for lvl in cls)
                raise HandlerConfigError(
                    f"Unknown log level value {value}. Valid values: {valid}"
                ) from exc
        if isinstance(value, str):
            level = cls.from_name(value)
            if level is None:
                valid = ", ".join(lvl.name for lvl in cls)
                raise HandlerConfigError(
                    f"Unknown log level '{value}'. Valid values: {valid}"
                )
            return level
        raise HandlerConfigError(f"Invalid log level: {value!r}")


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


@dataclass(frozen=True, slots=True)
class Record:
    """One structured log event.

    Records are never mutated once created. Processors and formatters derive a
    new record with ``with_``; context and extra keep their insertion order.
    """

    channel: str
    level: Level
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    datetime: dt.datetime = field(default_factory=_utcnow)
    formatted: str | None = None  # set by formatters, unused by the buffering handlers

    @property
    def level_name(self) -> str:
        return self.level.name

    def with_(self, **changes: Any) -> Record:
        """Return a copy of the record with the given fields replaced."""
        return replace(self, **changes)
