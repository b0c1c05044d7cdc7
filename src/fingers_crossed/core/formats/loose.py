"""Fallback parser based on severity keywords."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..models import Level, Record
from .base import build_record

DEFAULT_KEYWORDS: Mapping[Level, Iterable[str]] = {
    Level.EMERGENCY: ("EMERGENCY", "PANIC"),
    Level.ALERT: ("ALERT",),
    Level.CRITICAL: ("CRITICAL", "FATAL"),
    Level.ERROR: ("ERROR", "EXCEPTION", "TRACEBACK", "FAILED"),
    Level.WARNING: ("WARNING", "WARN", "TIMEOUT", "RETRY"),
    Level.NOTICE: ("NOTICE",),
    Level.INFO: ("INFO",),
    Level.DEBUG: ("DEBUG", "TRACE"),
}


@dataclass(frozen=True, slots=True)
class LooseLevelParser:
    """Fallback parser that detects level keywords anywhere in the line.

    Keywords are checked from the most severe level down. Lines without any
    keyword get ``default_level``, or are skipped when it is None.
    """

    keywords: Mapping[Level, Iterable[str]] | None = None
    default_level: Level | None = None

    def parse(self, line_no: int, line: str, *, channel: str) -> Record | None:
        """Parse a line by scanning for severity keywords."""
        kw = self.keywords or DEFAULT_KEYWORDS
        upper = line.upper()
        level = self.default_level
        for lvl in sorted(kw, reverse=True):
            if any(k in upper for k in kw[lvl]):
                level = lvl
                break
        if level is None:
            return None
        return build_record(
            line_no=line_no,
            channel=channel,
            level=level,
            message=line.strip(),
            timestamp=None,
        )
