"""Handler interfaces and shared base classes."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, TypeAlias, runtime_checkable

from ..errors import HandlerConfigError
from ..formatting import Formatter, LineFormatter
from ..models import Level, Record

Processor: TypeAlias = Callable[[Record], Record]


@runtime_checkable
class Sink(Protocol):
    """Downstream consumer of records.

    ``handle`` returns True when the record should not bubble to further
    handlers. ``is_handling`` and ``close`` are optional.
    """

    def handle(self, record: Record) -> bool:
        """Handle one record."""
        ...

    def handle_batch(self, records: Sequence[Record]) -> None:
        """Handle records in order."""
        ...


SinkFactory: TypeAlias = Callable[[Record | None, object], Sink]


def require_sink(candidate: object, *, owner: str) -> Sink:
    """Return the candidate if it satisfies the sink contract."""
    if not isinstance(candidate, Sink):
        raise HandlerConfigError(
            f"{owner}: expected a sink with handle() and handle_batch(), "
            f"got {type(candidate).__name__}"
        )
    return candidate


def close_sink(sink: object | None) -> None:
    """Close a sink if it supports closing."""
    close = getattr(sink, "close", None)
    if callable(close):
        close()


def reset_sink(sink: object | None) -> None:
    """Reset a sink if it supports resetting."""
    reset = getattr(sink, "reset", None)
    if callable(reset):
        reset()


@dataclass(slots=True)
class SinkRef:
    """A fixed sink, or a factory resolved lazily from a record.

    Factories are called as ``factory(record, owner)`` and the result is kept
    until ``forget()``.
    """

    target: Sink | SinkFactory
    owner: str
    resolved: Sink | None = None

    @classmethod
    def of(cls, target: Sink | SinkFactory, *, owner: str) -> SinkRef:
        if isinstance(target, Sink):
            return cls(target=target, owner=owner, resolved=target)
        if callable(target):
            return cls(target=target, owner=owner)
        raise HandlerConfigError(
            f"{owner}: sink must be a handler or a factory callable, "
            f"got {type(target).__name__}"
        )

    @property
    def is_factory(self) -> bool:
        return not isinstance(self.target, Sink)

    def get(self, record: Record | None, handler: object) -> Sink:
        if self.resolved is None:
            sink = self.target(record, handler)  # type: ignore[operator]
            self.resolved = require_sink(sink, owner=f"{self.owner} sink factory")
        return self.resolved

    def forget(self) -> None:
        """Close and drop a factory-built sink so the next delivery resolves a new one."""
        if self.is_factory:
            sink, self.resolved = self.resolved, None
            close_sink(sink)


class AbstractHandler:
    """Base handler: level filter, bubble flag and a processor stack."""

    def __init__(self, level: Level | int | str = Level.DEBUG, bubble: bool = True) -> None:
        self.level = Level.parse(level)
        self.bubble = bubble
        self._processors: list[Processor] = []

    def is_handling(self, record: Record) -> bool:
        return record.level >= self.level

    def handle(self, record: Record) -> bool:
        raise NotImplementedError

    def handle_batch(self, records: Sequence[Record]) -> None:
        for record in records:
            self.handle(record)

    def close(self) -> None:
        """Release resources. Safe to call more than once."""

    def reset(self) -> None:
        self._reset_processors()

    def push_processor(self, processor: Processor) -> AbstractHandler:
        """Add a processor; the last one pushed runs first."""
        if not callable(processor):
            raise HandlerConfigError(f"Processors must be callable, got {processor!r}")
        self._processors.insert(0, processor)
        return self

    def pop_processor(self) -> Processor:
        if not self._processors:
            raise HandlerConfigError("You tried to pop from an empty processor stack.")
        return self._processors.pop(0)

    def _process_record(self, record: Record) -> Record:
        for processor in self._processors:
            record = processor(record)
        return record

    def _reset_processors(self) -> None:
        for processor in self._processors:
            reset_sink(processor)

    def __enter__(self) -> AbstractHandler:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level.name}, bubble={self.bubble})"


class AbstractProcessingHandler(AbstractHandler):
    """Handler that filters, processes and formats a record, then writes it."""

    def __init__(
        self,
        level: Level | int | str = Level.DEBUG,
        bubble: bool = True,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(level, bubble)
        self.formatter: Formatter = formatter or LineFormatter()

    def handle(self, record: Record) -> bool:
        if not self.is_handling(record):
            return False
        if self._processors:
            record = self._process_record(record)
        record = record.with_(formatted=self.formatter.format(record))
        self.write(record)
        return not self.bubble

    def write(self, record: Record) -> None:
        """Write a formatted record to the underlying destination."""
        raise NotImplementedError
