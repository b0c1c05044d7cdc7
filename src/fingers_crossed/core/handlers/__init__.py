"""Handlers: the buffering family plus the sinks and wrappers around it."""

from __future__ import annotations

from .base import (
    AbstractHandler,
    AbstractProcessingHandler,
    Processor,
    Sink,
    SinkFactory,
    SinkRef,
)
from .buffer import BufferHandler
from .deduplication import DeduplicationHandler, StoreEntry
from .fingers_crossed import FingersCrossedHandler, HandlerState
from .overflow import OverflowHandler
from .recording import RecordingHandler
from .stream import StreamHandler
from .wrappers import FilterHandler, GroupHandler, NullHandler, WhatFailureGroupHandler

__all__ = [
    "AbstractHandler",
    "AbstractProcessingHandler",
    "BufferHandler",
    "DeduplicationHandler",
    "FilterHandler",
    "FingersCrossedHandler",
    "GroupHandler",
    "HandlerState",
    "NullHandler",
    "OverflowHandler",
    "Processor",
    "RecordingHandler",
    "Sink",
    "SinkFactory",
    "SinkRef",
    "StoreEntry",
    "StreamHandler",
    "WhatFailureGroupHandler",
]
