from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from fingers_crossed.core.config import resolve_settings
from fingers_crossed.core.errors import HandlerConfigError
from fingers_crossed.core.models import Level
from fingers_crossed.core.replay import replay


def _parse_level(s: str) -> Level:
    try:
        return Level.parse(s)
    except HandlerConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_channel_level(s: str) -> tuple[str, Level]:
    channel, sep, level = s.partition("=")
    if not sep or not channel.strip():
        raise argparse.ArgumentTypeError("channel level must look like CHANNEL=LEVEL (e.g., sql=warning)")
    return channel.strip(), _parse_level(level)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Replay a log file through a fingers-crossed handler and print what it releases."
    )
    p.add_argument("log_path")
    p.add_argument("--action-level", type=_parse_level, default=None, help="Level that activates the handler (default: ERROR)")
    p.add_argument(
        "--channel-level",
        dest="channel_levels",
        type=_parse_channel_level,
        action="append",
        default=[],
        help="Per-channel activation level, CHANNEL=LEVEL (repeatable)",
    )
    p.add_argument("--buffer-limit", type=int, default=50, help="Records of context kept before an activation (0 = unbounded)")
    p.add_argument("--passthrough-level", type=_parse_level, default=None, help="Level printed on close even without activation")
    p.add_argument("--sticky", action="store_true", help="Keep printing everything after the first activation")
    p.add_argument("--channel", default=None, help="Channel for lines that carry none (default: file name)")
    p.add_argument("--contains", default=None, help="Only replay lines containing this substring")
    p.add_argument("--max", dest="max_results", type=int, default=None, help="Max records to print (default: no cap)")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    p = build_parser()
    args = p.parse_args(argv)
    path = Path(args.log_path)

    try:
        settings = resolve_settings().with_overrides(
            action_level=args.action_level,
            channel_levels=dict(args.channel_levels) or None,
            buffer_limit=args.buffer_limit,
            passthrough_level=args.passthrough_level,
            stop_buffering=args.sticky,
        )
        result = asyncio.run(replay(path, settings, channel=args.channel, contains=args.contains))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    records = result.records
    if args.max_results is not None:
        records = records[: args.max_results]
    for r in records:
        print(r.formatted)

    print(
        f"\nReleased {len(result.records)} of {result.total} records in {result.activations} activations."
    )


if __name__ == "__main__":
    main()
