from __future__ import annotations

from datetime import UTC, datetime

from fingers_crossed.core.formats import (
    BracketTimestampParser,
    CompositeParser,
    JsonLinesParser,
    LooseLevelParser,
    SyslogParser,
)
from fingers_crossed.core.formatting import LineFormatter
from fingers_crossed.core.models import Level


def test_bracket_parser_level_timestamp_and_line_no() -> None:
    record = BracketTimestampParser().parse(
        7, "2025-12-30 08:12:04 [ERROR] upstream timeout", channel="api"
    )

    assert record is not None
    assert record.level is Level.ERROR
    assert record.channel == "api"
    assert record.message == "upstream timeout"
    assert record.datetime == datetime(2025, 12, 30, 8, 12, 4, tzinfo=UTC)
    assert record.extra == {"line_no": 7}


def test_bracket_parser_unknown_level_uses_default() -> None:
    record = BracketTimestampParser(default_level=Level.NOTICE).parse(
        1, "2025-12-30T08:12:04Z [VERBOSE] chatty", channel="app"
    )

    assert record is not None
    assert record.level is Level.NOTICE


def test_bracket_parser_reads_line_formatter_output(make_record) -> None:
    line = LineFormatter().format(make_record(Level.NOTICE, "cache rebuilt", channel="worker"))

    record = BracketTimestampParser().parse(3, line, channel="fallback")

    assert record is not None
    assert record.channel == "worker"
    assert record.level is Level.NOTICE
    assert record.message == "cache rebuilt"


def test_syslog_rfc5424_uses_app_as_channel() -> None:
    line = "<11>1 2025-12-30T08:12:04Z web01 billing 123 ID47 - card declined"

    record = SyslogParser().parse(1, line, channel="app")

    assert record is not None
    assert record.level is Level.ERROR
    assert record.channel == "billing"
    assert record.message == "card declined"
    assert record.extra["syslog"] == {"facility": 1, "severity": 3, "host": "web01", "app": "billing"}


def test_syslog_rfc3164_tag_and_severity() -> None:
    record = SyslogParser().parse(2, "<34>Oct 11 22:14:15 mymachine su[42]: 'su root' failed", channel="app")

    assert record is not None
    assert record.level is Level.CRITICAL
    assert record.channel == "su"
    assert record.message == "'su root' failed"


def test_jsonl_parser_reads_channel_level_and_context() -> None:
    line = (
        '{"datetime": "2025-12-30T08:12:04+00:00", "channel": "sql", "level_name": "WARNING",'
        ' "message": "slow query", "context": {"ms": 812}}'
    )

    record = JsonLinesParser().parse(4, line, channel="app")

    assert record is not None
    assert record.channel == "sql"
    assert record.level is Level.WARNING
    assert record.context == {"ms": 812}
    assert record.datetime == datetime(2025, 12, 30, 8, 12, 4, tzinfo=UTC)


def test_jsonl_parser_numeric_levels_and_non_objects() -> None:
    parser = JsonLinesParser()

    record = parser.parse(1, '{"level": 550, "msg": "page someone"}', channel="app")
    assert record is not None
    assert record.level is Level.ALERT
    assert record.channel == "app"

    assert parser.parse(2, "[1, 2, 3]", channel="app") is None
    assert parser.parse(3, "{not json}", channel="app") is None


def test_loose_parser_picks_most_severe_keyword() -> None:
    parser = LooseLevelParser()

    record = parser.parse(1, "retry failed: FATAL error in worker", channel="app")
    assert record is not None
    assert record.level is Level.CRITICAL

    assert parser.parse(2, "nothing to see here", channel="app") is None
    assert LooseLevelParser(default_level=Level.INFO).parse(3, "plain", channel="app").level is Level.INFO


def test_composite_parser_first_match_wins() -> None:
    parser = CompositeParser([BracketTimestampParser(), LooseLevelParser()])

    bracket = parser.parse(1, "2025-12-30 08:00:00 [INFO] started", channel="app")
    loose = parser.parse(2, "WARNING: low disk", channel="app")

    assert bracket is not None and bracket.level is Level.INFO
    assert loose is not None and loose.level is Level.WARNING
    assert parser.parse(3, "???", channel="app") is None
