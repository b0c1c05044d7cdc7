"""Log line parsers used to replay existing log files as records."""

from __future__ import annotations

from .base import RecordParser, parse_iso_timestamp
from .bracket import BracketTimestampParser
from .composite import CompositeParser
from .jsonl import JsonLinesParser
from .loose import LooseLevelParser
from .syslog import SyslogParser

__all__ = [
    "BracketTimestampParser",
    "CompositeParser",
    "JsonLinesParser",
    "LooseLevelParser",
    "RecordParser",
    "SyslogParser",
    "parse_iso_timestamp",
]
