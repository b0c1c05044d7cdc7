"""Bridge from the stdlib ``logging`` module into the handler family."""

from __future__ import annotations

import datetime as dt
import logging

from .handlers.base import Sink, close_sink, require_sink
from .models import Level, Record


def level_from_stdlib(levelno: int) -> Level:
    """Map a stdlib level number onto the closest level at or below it."""
    if levelno >= logging.CRITICAL:
        return Level.CRITICAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARNING
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class BridgeHandler(logging.Handler):
    """``logging.Handler`` that converts stdlib records and passes them on.

    Lets a fingers-crossed (or any other) handler sit behind
    ``logging.getLogger()``:

        logging.getLogger().addHandler(BridgeHandler(FingersCrossedHandler(sink)))
    """

    def __init__(self, target: Sink, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.target = require_sink(target, owner=type(self).__name__)

    def to_record(self, record: logging.LogRecord) -> Record:
        context: dict[str, object] = {}
        if record.exc_info:
            context["exception"] = logging.Formatter().formatException(record.exc_info)
        if record.stack_info:
            context["stack"] = record.stack_info
        return Record(
            channel=record.name,
            level=level_from_stdlib(record.levelno),
            message=record.getMessage(),
            context=context,
            extra={
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
                "thread": record.threadName,
            },
            datetime=dt.datetime.fromtimestamp(record.created, dt.UTC),
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.target.handle(self.to_record(record))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            close_sink(self.target)
        finally:
            super().close()
