"""Syslog parser."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass

from ..models import Level, Record
from .base import build_record, parse_iso_timestamp

# Syslog severities 0..7, most severe first.
_SEVERITY_LEVELS = (
    Level.EMERGENCY,
    Level.ALERT,
    Level.CRITICAL,
    Level.ERROR,
    Level.WARNING,
    Level.NOTICE,
    Level.INFO,
    Level.DEBUG,
)


@dataclass(frozen=True, slots=True)
class SyslogParser:
    """Parse Syslog RFC5424/RFC3164-style lines using PRI for severity.

    The app name (or tag) becomes the record channel.
    """

    _rfc5424 = re.compile(
        r"^<(?P<pri>\d{1,3})>(?P<ver>\d)\s+"
        r"(?P<ts>\S+)\s+"
        r"(?P<host>\S+)\s+"
        r"(?P<app>\S+)\s+"
        r"(?P<proc>\S+)\s+"
        r"(?P<msgid>\S+)\s*"
        r"(?P<sd>\[[^\]]*\]|-)?\s*"
        r"(?P<msg>.*)$"
    )

    _rfc3164 = re.compile(
        r"^<(?P<pri>\d{1,3})>"
        r"(?P<ts>[A-Z][a-z]{2}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+"
        r"(?P<host>\S+)\s+"
        r"(?P<tag>[^:\[]+)(?:\[\d+\])?:\s*"
        r"(?P<msg>.*)$"
    )

    @staticmethod
    def level_from_pri(pri: int) -> Level:
        """Map syslog PRI to a level."""
        return _SEVERITY_LEVELS[pri % 8]

    @staticmethod
    def _parse_rfc3164_ts(ts_str: str) -> dt.datetime | None:
        """Parse RFC3164 timestamps (no year) into UTC datetimes."""
        try:
            naive = dt.datetime.strptime(" ".join(ts_str.split()), "%b %d %H:%M:%S")
        except ValueError:
            return None

        now = dt.datetime.now(dt.UTC)
        ts = naive.replace(year=now.year, tzinfo=dt.UTC)
        if ts > now + dt.timedelta(days=1):
            ts = ts.replace(year=now.year - 1)
        return ts

    @staticmethod
    def _syslog_extra(*, pri: int, host: str, app: str) -> dict:
        return {"syslog": {"facility": pri // 8, "severity": pri % 8, "host": host, "app": app}}

    def parse(self, line_no: int, line: str, *, channel: str) -> Record | None:
        """Parse a syslog line into a Record."""
        m = self._rfc5424.match(line)
        if m:
            pri = int(m.group("pri"))
            host = m.group("host")
            app = m.group("app")
            return build_record(
                line_no=line_no,
                channel=app if app != "-" else channel,
                level=self.level_from_pri(pri),
                message=(m.group("msg") or "").strip(),
                timestamp=parse_iso_timestamp(m.group("ts")),
                extra=self._syslog_extra(pri=pri, host=host, app=app),
            )

        m = self._rfc3164.match(line)
        if m:
            pri = int(m.group("pri"))
            host = m.group("host")
            app = m.group("tag").strip()
            return build_record(
                line_no=line_no,
                channel=app or channel,
                level=self.level_from_pri(pri),
                message=(m.group("msg") or "").strip(),
                timestamp=self._parse_rfc3164_ts(m.group("ts")),
                extra=self._syslog_extra(pri=pri, host=host, app=app),
            )

        return None
