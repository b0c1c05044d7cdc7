"""Handlers that route records to other handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..errors import HandlerConfigError
from ..models import Level, Record
from .base import AbstractHandler, Sink, SinkFactory, SinkRef, close_sink, require_sink, reset_sink

logger = logging.getLogger(__name__)


class NullHandler(AbstractHandler):
    """Swallow every record at or above its level."""

    def __init__(self, level: Level | int | str = Level.DEBUG) -> None:
        super().__init__(level, bubble=False)

    def handle(self, record: Record) -> bool:
        if not self.is_handling(record):
            return False
        return not self.bubble

    def handle_batch(self, records: Sequence[Record]) -> None:
        return None


class FilterHandler(AbstractHandler):
    """Forward only records whose level is accepted.

    Accepts either a min/max range or an explicit list of levels.
    """

    def __init__(
        self,
        sink: Sink | SinkFactory,
        min_level_or_list: Level | int | str | Iterable[Level | int | str] = Level.DEBUG,
        max_level: Level | int | str = Level.EMERGENCY,
        bubble: bool = True,
    ) -> None:
        super().__init__(Level.DEBUG, bubble)
        self._sink = SinkRef.of(sink, owner=type(self).__name__)
        self.set_accepted_levels(min_level_or_list, max_level)

    def set_accepted_levels(
        self,
        min_level_or_list: Level | int | str | Iterable[Level | int | str] = Level.DEBUG,
        max_level: Level | int | str = Level.EMERGENCY,
    ) -> None:
        if isinstance(min_level_or_list, (Level, int, str)):
            low = Level.parse(min_level_or_list)
            high = Level.parse(max_level)
            accepted = {lvl for lvl in Level if low <= lvl <= high}
        else:
            accepted = {Level.parse(lvl) for lvl in min_level_or_list}
        self.accepted_levels = frozenset(accepted)

    def is_handling(self, record: Record) -> bool:
        return record.level in self.accepted_levels

    def get_sink(self, record: Record | None = None) -> Sink:
        return self._sink.get(record, self)

    def handle(self, record: Record) -> bool:
        if not self.is_handling(record):
            return False
        if self._processors:
            record = self._process_record(record)
        self.get_sink(record).handle(record)
        return not self.bubble

    def handle_batch(self, records: Sequence[Record]) -> None:
        accepted = [r for r in records if self.is_handling(r)]
        if accepted:
            self.get_sink(accepted[-1]).handle_batch(accepted)

    def close(self) -> None:
        close_sink(self._sink.resolved)

    def reset(self) -> None:
        super().reset()
        reset_sink(self._sink.resolved)


class GroupHandler(AbstractHandler):
    """Send every record (and batch) to each handler of the group."""

    def __init__(self, handlers: Iterable[Sink], bubble: bool = True) -> None:
        super().__init__(Level.DEBUG, bubble)
        self.handlers: list[Sink] = [
            require_sink(h, owner=type(self).__name__) for h in handlers
        ]
        if not self.handlers:
            raise HandlerConfigError(f"{type(self).__name__} needs at least one handler")

    def is_handling(self, record: Record) -> bool:
        for handler in self.handlers:
            is_handling = getattr(handler, "is_handling", None)
            if is_handling is None or is_handling(record):
                return True
        return False

    def handle(self, record: Record) -> bool:
        if self._processors:
            record = self._process_record(record)
        for handler in self.handlers:
            self._call(handler.handle, record)
        return not self.bubble

    def handle_batch(self, records: Sequence[Record]) -> None:
        if self._processors:
            records = [self._process_record(r) for r in records]
        for handler in self.handlers:
            self._call(handler.handle_batch, records)

    def close(self) -> None:
        for handler in self.handlers:
            self._call(close_sink, handler)

    def reset(self) -> None:
        super().reset()
        for handler in self.handlers:
            self._call(reset_sink, handler)

    def _call(self, fn, arg) -> None:
        fn(arg)


class WhatFailureGroupHandler(GroupHandler):
    """Group handler that keeps going when a member fails.

    Failures are reported through this module's logger and otherwise ignored.
    """

    def _call(self, fn, arg) -> None:
        try:
            fn(arg)
        except Exception:
            logger.warning("Handler call %s failed in group", getattr(fn, "__qualname__", fn), exc_info=True)
