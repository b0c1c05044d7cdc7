"""In-memory handler that keeps everything it receives."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence

from ..formatting import Formatter
from ..models import Level, Record
from .base import AbstractProcessingHandler


class RecordingHandler(AbstractProcessingHandler):
    """Keep handled records in memory, grouped by level, plus received batches."""

    def __init__(
        self,
        level: Level | int | str = Level.DEBUG,
        bubble: bool = True,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(level, bubble, formatter)
        self.records: list[Record] = []
        self.records_by_level: dict[Level, list[Record]] = defaultdict(list)
        self.batches: list[list[Record]] = []

    def write(self, record: Record) -> None:
        self.records_by_level[record.level].append(record)
        self.records.append(record)

    def handle_batch(self, records: Sequence[Record]) -> None:
        self.batches.append(list(records))
        super().handle_batch(records)

    def clear(self) -> None:
        self.records = []
        self.records_by_level = defaultdict(list)
        self.batches = []

    @property
    def messages(self) -> list[str]:
        return [r.message for r in self.records]

    def has_records(self, level: Level | int | str) -> bool:
        return bool(self.records_by_level.get(Level.parse(level)))

    def has_record(self, message: str, level: Level | int | str) -> bool:
        return self.has_record_that_passes(lambda r: r.message == message, level)

    def has_record_that_contains(self, text: str, level: Level | int | str) -> bool:
        return self.has_record_that_passes(lambda r: text in r.message, level)

    def has_record_that_passes(
        self, predicate: Callable[[Record], bool], level: Level | int | str
    ) -> bool:
        return any(predicate(r) for r in self.records_by_level.get(Level.parse(level), ()))
