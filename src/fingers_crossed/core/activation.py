"""Activation strategies for the fingers-crossed handler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .errors import HandlerConfigError
from .models import Level, Record


@runtime_checkable
class ActivationStrategy(Protocol):
    """Decides whether a record releases the buffered records."""

    def is_activated(self, record: Record) -> bool:
        """Return True when the record should activate the handler."""
        ...


@dataclass(frozen=True, slots=True)
class ErrorLevelActivationStrategy:
    """Activate on any record at or above ``action_level``."""

    action_level: Level = Level.ERROR

    def __post_init__(self) -> None:
        object.__setattr__(self, "action_level", Level.parse(self.action_level))

    def is_activated(self, record: Record) -> bool:
        return record.level >= self.action_level


@dataclass(frozen=True, slots=True)
class ChannelLevelActivationStrategy:
    """Activate on a per-channel level, falling back to ``default_level``.

    E.g. activate on ERROR by default, but on WARNING for the ``sql`` channel:

        ChannelLevelActivationStrategy(Level.ERROR, {"sql": Level.WARNING})
    """

    default_level: Level = Level.ERROR
    channel_levels: Mapping[str, Level] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_level", Level.parse(self.default_level))
        object.__setattr__(
            self,
            "channel_levels",
            {channel: Level.parse(lvl) for channel, lvl in self.channel_levels.items()},
        )

    def is_activated(self, record: Record) -> bool:
        threshold = self.channel_levels.get(record.channel, self.default_level)
        return record.level >= threshold


def resolve_activation_strategy(
    value: ActivationStrategy | Level | int | str | None,
) -> ActivationStrategy:
    """Turn a strategy, a bare level or None into an activation strategy."""
    if value is None:
        return ErrorLevelActivationStrategy(Level.ERROR)
    if isinstance(value, (Level, int, str)) and not isinstance(value, bool):
        return ErrorLevelActivationStrategy(Level.parse(value))
    if isinstance(value, ActivationStrategy) and callable(value.is_activated):
        return value
    raise HandlerConfigError(
        f"Invalid activation strategy of type {type(value).__name__}: "
        "expected a level or an object with is_activated(record)"
    )
