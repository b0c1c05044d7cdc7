"""Handler settings and environment overrides."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .activation import (
    ActivationStrategy,
    ChannelLevelActivationStrategy,
    ErrorLevelActivationStrategy,
)
from .handlers.base import Sink, SinkFactory
from .handlers.fingers_crossed import FingersCrossedHandler
from .models import Level

ENV_PREFIX = "FINGERS_CROSSED_"
_ENV_FIELDS = {
    "ACTION_LEVEL": "action_level",
    "BUFFER_LIMIT": "buffer_limit",
    "PASSTHROUGH_LEVEL": "passthrough_level",
    "STOP_BUFFERING": "stop_buffering",
}


class FingersCrossedSettings(BaseModel):
    """Configuration of a fingers-crossed handler."""

    model_config = ConfigDict(frozen=True)

    action_level: Level = Field(default=Level.ERROR, description="Level that activates the handler.")
    channel_levels: dict[str, Level] = Field(
        default_factory=dict, description="Per-channel activation levels."
    )
    buffer_limit: int = Field(default=0, ge=0, description="Max buffered records, 0 = unbounded.")
    bubble: bool = True
    stop_buffering: bool = Field(default=True, description="Stay activated until reset.")
    passthrough_level: Level | None = Field(
        default=None, description="Level forwarded on close even without activation."
    )
    level: Level = Field(default=Level.DEBUG, description="Minimum level entering the handler.")

    @field_validator("action_level", "passthrough_level", "level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return Level.parse(value)

    @field_validator("channel_levels", mode="before")
    @classmethod
    def _parse_channel_levels(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): Level.parse(v) for k, v in value.items()}
        return value

    def activation_strategy(self) -> ActivationStrategy:
        if self.channel_levels:
            return ChannelLevelActivationStrategy(self.action_level, self.channel_levels)
        return ErrorLevelActivationStrategy(self.action_level)

    def with_overrides(self, **overrides: Any) -> FingersCrossedSettings:
        """Return validated settings with the non-None overrides applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return type(self).model_validate({**self.model_dump(), **updates})


def resolve_settings(settings: FingersCrossedSettings | None = None) -> FingersCrossedSettings:
    """Return settings with ``FINGERS_CROSSED_*`` environment overrides applied."""
    if settings is None:
        settings = FingersCrossedSettings()

    overrides: dict[str, str] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        raw = os.getenv(ENV_PREFIX + suffix)
        if raw is None or raw == "":
            continue
        overrides[field_name] = raw
    return settings.with_overrides(**overrides)


def build_handler(
    sink: Sink | SinkFactory,
    settings: FingersCrossedSettings | None = None,
) -> FingersCrossedHandler:
    """Build a fingers-crossed handler around ``sink`` from settings."""
    settings = settings or FingersCrossedSettings()
    return FingersCrossedHandler(
        sink,
        settings.activation_strategy(),
        buffer_limit=settings.buffer_limit,
        bubble=settings.bubble,
        stop_buffering=settings.stop_buffering,
        passthrough_level=settings.passthrough_level,
        level=settings.level,
    )
