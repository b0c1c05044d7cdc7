from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from fingers_crossed.core.handlers.recording import RecordingHandler
from fingers_crossed.core.models import Level, Record

BASE_TIME = datetime(2025, 12, 30, 8, 0, 0, tzinfo=UTC)


class SpySink:
    """Sink that remembers how each record reached it (single or batch)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[Record]]] = []
        self.closed = 0
        self.resets = 0

    def handle(self, record: Record) -> bool:
        self.calls.append(("handle", [record]))
        return False

    def handle_batch(self, records: Sequence[Record]) -> None:
        self.calls.append(("batch", list(records)))

    def close(self) -> None:
        self.closed += 1

    def reset(self) -> None:
        self.resets += 1

    @property
    def messages(self) -> list[str]:
        return [r.message for _, records in self.calls for r in records]

    @property
    def batches(self) -> list[list[Record]]:
        return [records for kind, records in self.calls if kind == "batch"]

    @property
    def singles(self) -> list[Record]:
        return [records[0] for kind, records in self.calls if kind == "handle"]


@pytest.fixture
def make_record() -> Callable[..., Record]:
    def _make(
        level: Level | str = Level.DEBUG,
        message: str = "msg",
        *,
        channel: str = "app",
        seconds: float = 0,
        context: dict[str, Any] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> Record:
        return Record(
            channel=channel,
            level=Level.parse(level),
            message=message,
            context=context or {},
            extra=extra or {},
            datetime=BASE_TIME + timedelta(seconds=seconds),
        )

    return _make


@pytest.fixture
def spy() -> SpySink:
    return SpySink()


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def write_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "\n".join(
                [
                    "2025-12-30T08:12:00Z [DEBUG] loading config",
                    "2025-12-30T08:12:01Z [INFO] service started",
                    "2025-12-30T08:12:02Z [DEBUG] cache warmup",
                    "2025-12-30T08:12:03Z [WARNING] retrying request id=abc123",
                    "2025-12-30T08:12:04Z [ERROR] upstream timeout route=/api/v1/items",
                    "2025-12-30T08:12:05Z [INFO] request done",
                    "2025-12-30T08:12:06Z [DEBUG] idle",
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write
