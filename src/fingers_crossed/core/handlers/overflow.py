"""Hold records back until a per-level count is exceeded."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from ..errors import HandlerConfigError
from ..models import Level, Record
from .base import AbstractHandler, Sink, close_sink, require_sink

logger = logging.getLogger(__name__)


class OverflowHandler(AbstractHandler):
    """Release records only once a level shows up more often than allowed.

    ``thresholds`` maps a level to how many of its records are held back. Levels
    without a threshold (or with 0) are forwarded straight away. When a level's
    count goes past its threshold, every held-back record (all levels, in
    arrival order) is forwarded as one batch together with the current record,
    and from then on every record is forwarded immediately.

    Example: ``OverflowHandler(sink, {Level.INFO: 3})`` stays silent for three
    INFO records and sends all four when the fourth arrives.
    """

    def __init__(
        self,
        sink: Sink,
        thresholds: Mapping[Level | int | str, int] | None = None,
        level: Level | int | str = Level.DEBUG,
        bubble: bool = True,
    ) -> None:
        super().__init__(level, bubble)
        self._sink = require_sink(sink, owner=type(self).__name__)
        self.thresholds: dict[Level, int] = {}
        for lvl, threshold in (thresholds or {}).items():
            if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
                raise HandlerConfigError(
                    f"Threshold for {lvl} must be an integer >= 0, got {threshold!r}"
                )
            self.thresholds[Level.parse(lvl)] = threshold
        self._counts: dict[Level, int] = {}
        self._buffer: list[Record] = []
        self._released = False
        self._lock = threading.RLock()

    @property
    def released(self) -> bool:
        return self._released

    @property
    def buffered(self) -> list[Record]:
        with self._lock:
            return list(self._buffer)

    def handle(self, record: Record) -> bool:
        if not self.is_handling(record):
            return False

        if self._processors:
            record = self._process_record(record)

        with self._lock:
            threshold = self.thresholds.get(record.level, 0)
            if self._released or threshold == 0:
                self._sink.handle(record)
                return not self.bubble

            count = self._counts.get(record.level, 0) + 1
            self._counts[record.level] = count
            if count <= threshold:
                self._buffer.append(record)
                return not self.bubble

            batch, self._buffer = self._buffer, []
            batch.append(record)
            self._released = True
            logger.debug(
                "%s threshold of %d exceeded, releasing %d records",
                record.level.name,
                threshold,
                len(batch),
            )
            self._sink.handle_batch(batch)

        return not self.bubble

    def reset(self) -> None:
        """Drop held-back records and start counting again."""
        with self._lock:
            self._buffer = []
            self._counts = {}
            self._released = False
        super().reset()

    def close(self) -> None:
        close_sink(self._sink)
