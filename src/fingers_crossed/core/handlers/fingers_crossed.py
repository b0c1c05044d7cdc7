"""Buffer records until an activation condition fires, then release them.

The handler keeps every accepted record in a bounded ring buffer while it is
BUFFERING. When the activation strategy accepts a record (or ``activate()`` is
called) the buffer is drained to the wrapped sink as one batch, in arrival
order. With ``stop_buffering`` (the default) the handler then stays ACTIVATED
and forwards each later record directly until ``reset()``; otherwise it goes on
buffering and the next burst needs a new activation.

A typical setup keeps debug noise out of the logs unless something goes wrong:

    handler = FingersCrossedHandler(
        StreamHandler(sys.stderr),
        ErrorLevelActivationStrategy(Level.ERROR),
        buffer_limit=200,
    )
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from enum import Enum

from ..activation import ActivationStrategy, resolve_activation_strategy
from ..models import Level, Record
from ..ring_buffer import BoundedRingBuffer
from .base import AbstractHandler, Sink, SinkFactory, SinkRef, close_sink, reset_sink

logger = logging.getLogger(__name__)


class HandlerState(str, Enum):
    """Buffering state of a FingersCrossedHandler."""

    BUFFERING = "BUFFERING"
    ACTIVATED = "ACTIVATED"


class FingersCrossedHandler(AbstractHandler):
    """Level-gated buffering handler with a pluggable activation strategy.

    Parameters
    ----------
    sink:
        The wrapped handler, or a factory ``(record, handler) -> Sink`` resolved
        on first delivery. A factory is consulted once per activation episode
        and cached for good when ``stop_buffering`` is set.
    activation_strategy:
        An ``ActivationStrategy``, or a level used as an error-level threshold.
        Defaults to ERROR.
    buffer_limit:
        Maximum number of buffered records (0 = unbounded). The oldest record
        is dropped once the limit is reached.
    bubble:
        When False, ``handle`` reports records as fully handled.
    stop_buffering:
        Whether activation is sticky until ``reset()``.
    passthrough_level:
        Buffered records at or above this level are forwarded on ``close()``
        even if the handler never activated.
    level:
        Records below this level never enter the handler.
    """

    def __init__(
        self,
        sink: Sink | SinkFactory,
        activation_strategy: ActivationStrategy | Level | int | str | None = None,
        buffer_limit: int = 0,
        bubble: bool = True,
        stop_buffering: bool = True,
        passthrough_level: Level | int | str | None = None,
        level: Level | int | str = Level.DEBUG,
    ) -> None:
        super().__init__(level, bubble)
        self._sink = SinkRef.of(sink, owner=type(self).__name__)
        self.activation_strategy = resolve_activation_strategy(activation_strategy)
        self._buffer = BoundedRingBuffer(buffer_limit)
        self.stop_buffering = stop_buffering
        self.passthrough_level = (
            Level.parse(passthrough_level) if passthrough_level is not None else None
        )
        self._state = HandlerState.BUFFERING
        self._lock = threading.RLock()

    @property
    def state(self) -> HandlerState:
        return self._state

    @property
    def buffer_limit(self) -> int:
        return self._buffer.limit

    @property
    def buffered(self) -> list[Record]:
        """Copy of the records currently held back."""
        with self._lock:
            return self._buffer.snapshot()

    def get_sink(self, record: Record | None = None) -> Sink:
        """Return the wrapped sink, resolving a factory if needed."""
        return self._sink.get(record, self)

    def handle(self, record: Record) -> bool:
        if not self.is_handling(record):
            return False

        if self._processors:
            record = self._process_record(record)

        with self._lock:
            if self._state is HandlerState.BUFFERING:
                self._buffer.append(record)
                if self.activation_strategy.is_activated(record):
                    self._activate()
            else:
                self.get_sink(record).handle(record)

        return not self.bubble

    def activate(self) -> None:
        """Release the buffer without waiting for a triggering record."""
        with self._lock:
            self._activate()

    def _activate(self) -> None:
        if self.stop_buffering:
            self._state = HandlerState.ACTIVATED
        else:
            self._sink.forget()

        batch = self._buffer.drain()
        if not batch:
            return
        logger.debug(
            "Activated by %s record on channel %r, flushing %d buffered records",
            batch[-1].level.name,
            batch[-1].channel,
            len(batch),
        )
        self._deliver(batch)

    def _deliver(self, batch: Sequence[Record]) -> None:
        self.get_sink(batch[-1]).handle_batch(batch)

    def close(self) -> None:
        """Forward passthrough records, drop the rest and close the sink."""
        with self._lock:
            batch = self._buffer.drain()
            self._state = HandlerState.BUFFERING
            if self.passthrough_level is not None:
                batch = [r for r in batch if r.level >= self.passthrough_level]
                if batch:
                    logger.debug(
                        "Closing with %d records at or above %s",
                        len(batch),
                        self.passthrough_level.name,
                    )
                    self._deliver(batch)
            sink = self._sink.resolved
        close_sink(sink)

    def reset(self) -> None:
        """Discard buffered records and go back to buffering."""
        with self._lock:
            self._buffer.clear()
            self._state = HandlerState.BUFFERING
            self._reset_processors()
            reset_sink(self._sink.resolved)

    def clear(self) -> None:
        """Same as reset()."""
        self.reset()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(state={self._state.value}, "
            f"buffer_limit={self._buffer.limit}, stop_buffering={self.stop_buffering})"
        )
