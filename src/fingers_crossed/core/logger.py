"""Channel logger: builds records and passes them down a handler stack."""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .errors import HandlerConfigError
from .handlers.base import Processor, Sink, close_sink, require_sink, reset_sink
from .models import Level, Record


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class Logger:
    """Named channel with a stack of handlers and processors.

    Handlers are tried in order; the first one whose ``handle`` returns True
    stops the record from bubbling further. Logger processors run once per
    record, before the first handler that accepts it.
    """

    def __init__(
        self,
        name: str,
        handlers: Iterable[Sink] = (),
        processors: Iterable[Processor] = (),
        *,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self.name = name
        self.handlers: list[Sink] = [require_sink(h, owner=f"Logger {name!r}") for h in handlers]
        self.processors: list[Processor] = list(processors)
        self._clock = clock

    def with_name(self, name: str) -> Logger:
        """Return a logger on another channel sharing handlers and processors."""
        return Logger(name, self.handlers, self.processors, clock=self._clock)

    def push_handler(self, handler: Sink) -> Logger:
        self.handlers.insert(0, require_sink(handler, owner=f"Logger {self.name!r}"))
        return self

    def pop_handler(self) -> Sink:
        if not self.handlers:
            raise HandlerConfigError("You tried to pop from an empty handler stack.")
        return self.handlers.pop(0)

    def push_processor(self, processor: Processor) -> Logger:
        if not callable(processor):
            raise HandlerConfigError(f"Processors must be callable, got {processor!r}")
        self.processors.insert(0, processor)
        return self

    def pop_processor(self) -> Processor:
        if not self.processors:
            raise HandlerConfigError("You tried to pop from an empty processor stack.")
        return self.processors.pop(0)

    def is_handling(self, level: Level | int | str) -> bool:
        probe = Record(channel=self.name, level=Level.parse(level), message="")
        return any(self._accepts(h, probe) for h in self.handlers)

    @staticmethod
    def _accepts(handler: Sink, record: Record) -> bool:
        is_handling = getattr(handler, "is_handling", None)
        return is_handling is None or is_handling(record)

    def log(
        self,
        level: Level | int | str,
        message: str,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        """Create a record and hand it to the handler stack.

        Returns True when at least one handler accepted the record.
        """
        record = Record(
            channel=self.name,
            level=Level.parse(level),
            message=str(message),
            context=dict(context or {}),
            datetime=self._clock(),
        )

        processed = False
        for handler in self.handlers:
            if not self._accepts(handler, record):
                continue
            if not processed:
                for processor in self.processors:
                    record = processor(record)
                processed = True
            if handler.handle(record):
                break
        return processed

    def debug(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.DEBUG, message, context)

    def info(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.INFO, message, context)

    def notice(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.NOTICE, message, context)

    def warning(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.WARNING, message, context)

    def error(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.ERROR, message, context)

    def critical(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.CRITICAL, message, context)

    def alert(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.ALERT, message, context)

    def emergency(self, message: str, context: Mapping[str, Any] | None = None) -> bool:
        return self.log(Level.EMERGENCY, message, context)

    def reset(self) -> None:
        """Reset handlers and processors, e.g. between two jobs of a worker."""
        for handler in self.handlers:
            reset_sink(handler)
        for processor in self.processors:
            reset_sink(processor)

    def close(self) -> None:
        for handler in self.handlers:
            close_sink(handler)
