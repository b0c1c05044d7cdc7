"""Replay existing log files through a fingers-crossed handler.

Reads a plain or gzip-compressed log file, parses each line into a Record and
pushes the records through a handler built from ``FingersCrossedSettings``.
The result holds only what the handler released: the context that led up to
each activation, plus passthrough records on close.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .config import FingersCrossedSettings, build_handler
from .formats import (
    BracketTimestampParser,
    CompositeParser,
    JsonLinesParser,
    LooseLevelParser,
    RecordParser,
    SyslogParser,
)
from .handlers.recording import RecordingHandler
from .models import Level, Record

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def default_parser() -> RecordParser:
    """Default parser chain (first match wins)."""
    return CompositeParser(
        parsers=[
            SyslogParser(),
            BracketTimestampParser(),
            JsonLinesParser(),
            LooseLevelParser(),
        ]
    )


def default_channel(path: Path) -> str:
    """Channel for records of a file: its name up to the first dot."""
    return path.name.split(".", 1)[0] or "app"


async def iter_records(
    log_path: str | Path,
    *,
    parser: RecordParser | None = None,
    channel: str | None = None,
    contains: str | None = None,
    min_level: Level | None = None,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[Record]:
    """Yield a Record for every recognized line, in file order."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    parser = parser or default_parser()
    channel = channel or default_channel(path)

    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        async for line_no, line in _enumerate_async(f, start=1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            if contains is not None and contains not in line:
                continue
            record = parser.parse(line_no, line, channel=channel)
            if record is None:
                continue
            if min_level is not None and record.level < min_level:
                continue
            yield record


@dataclass(frozen=True, slots=True)
class ReplayResult:
    """Records released by the handler during a replay."""

    records: list[Record]
    activations: int  # batches released before close
    total: int  # records read from the file


async def replay(
    log_path: str | Path,
    settings: FingersCrossedSettings | None = None,
    *,
    parser: RecordParser | None = None,
    channel: str | None = None,
    contains: str | None = None,
) -> ReplayResult:
    """Push a log file through a fingers-crossed handler and collect the output."""
    settings = settings or FingersCrossedSettings()
    sink = RecordingHandler()
    handler = build_handler(sink, settings)

    total = 0
    try:
        async for record in iter_records(log_path, parser=parser, channel=channel, contains=contains):
            total += 1
            handler.handle(record)
        activations = len(sink.batches)
    finally:
        handler.close()

    logger.debug(
        "Replayed %d records from %s: %d released in %d activations",
        total,
        log_path,
        len(sink.records),
        activations,
    )
    return ReplayResult(records=list(sink.records), activations=activations, total=total)


async def _enumerate_async(iterable, start: int = 0):
    """Async enumerate helper for async iterators."""
    index = start
    async for item in iterable:
        yield index, item
        index += 1
