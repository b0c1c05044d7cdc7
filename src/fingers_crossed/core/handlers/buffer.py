"""Buffer every record and hand the batch over on flush."""

from __future__ import annotations

import logging
import threading

from ..models import Level, Record
from ..ring_buffer import BoundedRingBuffer
from .base import AbstractHandler, Sink, close_sink, require_sink, reset_sink

logger = logging.getLogger(__name__)


class BufferHandler(AbstractHandler):
    """Hold records until ``flush()`` or ``close()``.

    With a ``buffer_limit`` the oldest record is dropped when the buffer is
    full, unless ``flush_on_overflow`` is set, in which case the full buffer is
    flushed before the new record is stored.
    """

    def __init__(
        self,
        sink: Sink,
        buffer_limit: int = 0,
        level: Level | int | str = Level.DEBUG,
        bubble: bool = True,
        flush_on_overflow: bool = False,
    ) -> None:
        super().__init__(level, bubble)
        self._sink = require_sink(sink, owner=type(self).__name__)
        self._buffer = BoundedRingBuffer(buffer_limit)
        self.flush_on_overflow = flush_on_overflow
        self._lock = threading.RLock()

    @property
    def handler(self) -> Sink:
        return self._sink

    def set_handler(self, sink: Sink) -> None:
        """Swap the downstream sink; buffered records go to the new one."""
        with self._lock:
            self._sink = require_sink(sink, owner=type(self).__name__)

    @property
    def buffer_limit(self) -> int:
        return self._buffer.limit

    @property
    def buffered(self) -> list[Record]:
        with self._lock:
            return self._buffer.snapshot()

    def handle(self, record: Record) -> bool:
        if not self.is_handling(record):
            return False

        if self._processors:
            record = self._process_record(record)

        with self._lock:
            if self.flush_on_overflow and self._buffer.is_full():
                logger.debug("Buffer limit %d reached, flushing", self._buffer.limit)
                self.flush()
            self._buffer.append(record)

        return not self.bubble

    def flush(self) -> None:
        """Forward the buffered records as one batch and empty the buffer."""
        with self._lock:
            batch = self._buffer.drain()
            if batch:
                self._sink.handle_batch(batch)

    def clear(self) -> None:
        """Discard buffered records without forwarding them."""
        with self._lock:
            self._buffer.clear()

    def close(self) -> None:
        self.flush()
        close_sink(self._sink)

    def reset(self) -> None:
        self.flush()
        super().reset()
        reset_sink(self._sink)
