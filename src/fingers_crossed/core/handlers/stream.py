"""Write formatted records to a text stream."""

from __future__ import annotations

import sys
import threading
from typing import TextIO

from ..formatting import Formatter
from ..models import Level, Record
from .base import AbstractProcessingHandler


class StreamHandler(AbstractProcessingHandler):
    """One formatted line per record on ``stream`` (stderr by default).

    The stream belongs to the caller and is flushed, never closed.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        level: Level | int | str = Level.DEBUG,
        bubble: bool = True,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(level, bubble, formatter)
        self.stream = stream if stream is not None else sys.stderr
        self._lock = threading.Lock()

    def write(self, record: Record) -> None:
        with self._lock:
            self.stream.write(f"{record.formatted}\n")
            self.stream.flush()

    def close(self) -> None:
        with self._lock:
            if not self.stream.closed:
                self.stream.flush()
