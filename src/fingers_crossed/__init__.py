"""Fingers-crossed logging: hold records back until something goes wrong."""

from __future__ import annotations

from fingers_crossed.core.activation import (
    ActivationStrategy,
    ChannelLevelActivationStrategy,
    ErrorLevelActivationStrategy,
)
from fingers_crossed.core.bridge import BridgeHandler
from fingers_crossed.core.config import FingersCrossedSettings, build_handler, resolve_settings
from fingers_crossed.core.errors import (
    DeduplicationStoreError,
    FingersCrossedError,
    HandlerConfigError,
)
from fingers_crossed.core.formatting import LineFormatter
from fingers_crossed.core.handlers import (
    BufferHandler,
    DeduplicationHandler,
    FilterHandler,
    FingersCrossedHandler,
    GroupHandler,
    HandlerState,
    NullHandler,
    OverflowHandler,
    RecordingHandler,
    Sink,
    StreamHandler,
    WhatFailureGroupHandler,
)
from fingers_crossed.core.logger import Logger
from fingers_crossed.core.models import Level, Record

__all__ = [
    "ActivationStrategy",
    "BridgeHandler",
    "BufferHandler",
    "ChannelLevelActivationStrategy",
    "DeduplicationHandler",
    "DeduplicationStoreError",
    "ErrorLevelActivationStrategy",
    "FilterHandler",
    "FingersCrossedError",
    "FingersCrossedHandler",
    "FingersCrossedSettings",
    "GroupHandler",
    "HandlerConfigError",
    "HandlerState",
    "Level",
    "LineFormatter",
    "Logger",
    "NullHandler",
    "OverflowHandler",
    "Record",
    "RecordingHandler",
    "Sink",
    "StreamHandler",
    "WhatFailureGroupHandler",
    "build_handler",
    "resolve_settings",
]
