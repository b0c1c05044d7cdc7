from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from fingers_crossed.core.config import FingersCrossedSettings
from fingers_crossed.core.models import Level
from fingers_crossed.core.replay import default_channel, iter_records, replay


@pytest.mark.asyncio
async def test_iter_records_parses_every_line(tmp_path: Path, write_log) -> None:
    path = tmp_path / "app.log"
    write_log(path)

    records = [r async for r in iter_records(path)]

    assert len(records) == 7
    assert [r.extra["line_no"] for r in records] == list(range(1, 8))
    assert {r.channel for r in records} == {"app"}
    assert records[4].level is Level.ERROR


@pytest.mark.asyncio
async def test_iter_records_filters(tmp_path: Path, write_log) -> None:
    path = tmp_path / "app.log"
    write_log(path)

    by_level = [r async for r in iter_records(path, min_level=Level.WARNING)]
    by_text = [r async for r in iter_records(path, contains="request")]

    assert [r.level for r in by_level] == [Level.WARNING, Level.ERROR]
    assert [r.message for r in by_text] == ["retrying request id=abc123", "request done"]


@pytest.mark.asyncio
async def test_iter_records_reads_gzip(tmp_path: Path) -> None:
    path = tmp_path / "worker.log.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write("2025-12-30T08:00:00Z [INFO] compressed\n\n")

    records = [r async for r in iter_records(path)]

    assert [r.message for r in records] == ["compressed"]
    assert records[0].channel == "worker"


@pytest.mark.asyncio
async def test_iter_records_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Log file not found"):
        _ = [r async for r in iter_records(tmp_path / "nope.log")]


@pytest.mark.asyncio
async def test_replay_sticky_releases_context_and_tail(tmp_path: Path, write_log) -> None:
    path = tmp_path / "app.log"
    write_log(path)

    result = await replay(path)

    assert result.total == 7
    assert result.activations == 1
    assert [r.message for r in result.records][-3:] == [
        "upstream timeout route=/api/v1/items",
        "request done",
        "idle",
    ]
    assert all(r.formatted for r in result.records)


@pytest.mark.asyncio
async def test_replay_bounded_non_sticky(tmp_path: Path, write_log) -> None:
    path = tmp_path / "app.log"
    write_log(path)

    result = await replay(path, FingersCrossedSettings(buffer_limit=2, stop_buffering=False))

    assert [r.level for r in result.records] == [Level.WARNING, Level.ERROR]
    assert result.activations == 1


@pytest.mark.asyncio
async def test_replay_passthrough_without_activation(tmp_path: Path, write_log) -> None:
    path = tmp_path / "app.log"
    write_log(path)

    result = await replay(
        path,
        FingersCrossedSettings(action_level="critical", passthrough_level="info"),
    )

    assert result.activations == 0
    assert [r.message for r in result.records] == [
        "service started",
        "retrying request id=abc123",
        "upstream timeout route=/api/v1/items",
        "request done",
    ]


def test_default_channel() -> None:
    assert default_channel(Path("/var/log/nginx.access.log")) == "nginx"
    assert default_channel(Path(".hidden")) == "app"
