"""Suppress batches that were already sent within a retention window.

Useful in front of noisy sinks (mail, chat) behind a fingers-crossed handler:
if a batch only repeats errors that were already sent in the last ``time_window``
seconds, it is dropped. The decision survives process restarts because sent
fingerprints are kept in a small text store, one ``timestamp:LEVEL:message``
line per entry.
"""

from __future__ import annotations

import hashlib
import logging
import re
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import NamedTuple

from ..errors import DeduplicationStoreError, HandlerConfigError
from ..models import Level, Record
from .base import Sink
from .buffer import BufferHandler

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"[\r\n].*", re.DOTALL)


def default_store_path() -> Path:
    """Per-installation store file in the system temp directory."""
    digest = hashlib.sha256(__file__.encode("utf-8")).hexdigest()[:20]
    return Path(tempfile.gettempdir()) / f"fingers-crossed-dedup-{digest}.log"


def first_line(message: str) -> str:
    """Cut a message at its first line break."""
    return _LINE_BREAK_RE.sub("", message)


class StoreEntry(NamedTuple):
    """One line of the deduplication store."""

    timestamp: int
    level_name: str
    message: str

    @classmethod
    def for_record(cls, record: Record) -> StoreEntry:
        return cls(int(record.datetime.timestamp()), record.level.name, first_line(record.message))

    @classmethod
    def parse(cls, line: str) -> StoreEntry | None:
        """Parse a store line; returns None for blank or malformed lines."""
        parts = line.rstrip("\r\n").split(":", 2)
        if len(parts) != 3:
            return None
        try:
            ts = int(parts[0])
        except ValueError:
            return None
        return cls(ts, parts[1], parts[2])

    def fingerprint(self) -> tuple[str, str]:
        return self.level_name, self.message

    def to_line(self) -> str:
        return f"{self.timestamp}:{self.level_name}:{self.message}"


class DeduplicationHandler(BufferHandler):
    """Buffer handler whose flush drops batches made only of recent duplicates.

    Only records at or above ``deduplication_level`` take part in the
    decision. A batch is forwarded when the store is missing, when any such
    record is not a recent duplicate, or when no record reaches the level.
    """

    def __init__(
        self,
        sink: Sink,
        store: str | Path | None = None,
        deduplication_level: Level | int | str = Level.ERROR,
        time_window: int = 60,
        bubble: bool = True,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(sink, 0, Level.DEBUG, bubble, False)
        if isinstance(time_window, bool) or not isinstance(time_window, int) or time_window < 0:
            raise HandlerConfigError("time_window must be an integer number of seconds >= 0")
        self.store = Path(store) if store is not None else default_store_path()
        self.deduplication_level = Level.parse(deduplication_level)
        self.time_window = time_window
        self._clock = clock

    def flush(self) -> None:
        with self._lock:
            batch = self._buffer.drain()
            if not batch:
                return

            store = self._read_store()
            passthrough: bool | None = None

            for record in batch:
                if record.level < self.deduplication_level:
                    continue
                passthrough = passthrough is True or store is None or not self.is_duplicate(store, record)
                if passthrough:
                    entry = StoreEntry.for_record(record)
                    self._append(entry)
                    if store is None:
                        store = []
                    store.append(entry)

            # None means no record reached the deduplication level.
            if passthrough is False:
                logger.debug("Suppressed duplicate batch of %d records", len(batch))
            else:
                self._sink.handle_batch(batch)

            self.collect_garbage()

    def is_duplicate(self, store: list[StoreEntry], record: Record) -> bool:
        """Whether the store holds the record's fingerprint within the window."""
        validity = int(record.datetime.timestamp()) - self.time_window
        expected = (record.level.name, first_line(record.message))
        for entry in reversed(store):
            if entry.fingerprint() == expected and entry.timestamp > validity:
                return True
        return False

    def collect_garbage(self) -> None:
        """Rewrite the store without entries older than the window."""
        if not self.store.exists():
            return
        cutoff = int(self._clock()) - self.time_window
        try:
            lines = self.store.read_text(encoding="utf-8").splitlines(keepends=True)
            kept = []
            for line in lines:
                entry = StoreEntry.parse(line)
                if entry is not None and entry.timestamp >= cutoff:
                    kept.append(line)
            if len(kept) != len(lines):
                self.store.write_text("".join(kept), encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise DeduplicationStoreError(
                f"Failed to collect deduplication store {self.store}: {exc}"
            ) from exc

    def _read_store(self) -> list[StoreEntry] | None:
        if not self.store.exists():
            return None
        try:
            text = self.store.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise DeduplicationStoreError(
                f"Failed to read deduplication store {self.store}: {exc}"
            ) from exc
        entries = []
        for line in text.splitlines():
            entry = StoreEntry.parse(line)
            if entry is not None:
                entries.append(entry)
        return entries

    def _append(self, entry: StoreEntry) -> None:
        try:
            with self.store.open("a", encoding="utf-8") as fh:
                fh.write(entry.to_line() + "\n")
        except (OSError, UnicodeError) as exc:
            raise DeduplicationStoreError(
                f"Failed to write {entry.level_name} entry to deduplication store {self.store}: {exc}"
            ) from exc
