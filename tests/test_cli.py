from __future__ import annotations

from pathlib import Path

import pytest

from fingers_crossed.cli import build_parser, main


def test_cli_prints_released_records(tmp_path: Path, write_log, capsys) -> None:
    log = tmp_path / "app.log"
    write_log(log)

    main([str(log), "--buffer-limit", "2"])

    out = capsys.readouterr().out.splitlines()
    assert "app.WARNING: retrying request id=abc123" in out[0]
    assert "app.ERROR: upstream timeout" in out[1]
    assert out[-1] == "Released 2 of 7 records in 1 activations."


def test_cli_sticky_and_max(tmp_path: Path, write_log, capsys) -> None:
    log = tmp_path / "app.log"
    write_log(log)

    main([str(log), "--sticky", "--action-level", "warning", "--max", "1"])

    out = [line for line in capsys.readouterr().out.splitlines() if line]
    assert len(out) == 2
    assert "loading config" in out[0]
    assert out[1] == "Released 7 of 7 records in 1 activations."


def test_cli_channel_level(tmp_path: Path, capsys) -> None:
    log = tmp_path / "app.log"
    log.write_text('{"channel": "sql", "level": "notice", "message": "slow"}\n', encoding="utf-8")

    main([str(log), "--channel-level", "sql=notice"])

    assert "sql.NOTICE: slow" in capsys.readouterr().out


def test_cli_missing_file_exits_2(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.log")])

    assert exc.value.code == 2
    assert "Log file not found" in capsys.readouterr().err


def test_cli_rejects_negative_buffer_limit(tmp_path: Path, write_log, capsys) -> None:
    log = tmp_path / "app.log"
    write_log(log)

    with pytest.raises(SystemExit) as exc:
        main([str(log), "--buffer-limit", "-1"])

    assert exc.value.code == 2
    assert capsys.readouterr().err.startswith("Error:")


@pytest.mark.parametrize("argv", [["x.log", "--action-level", "loud"], ["x.log", "--channel-level", "sql"]])
def test_cli_argument_errors(argv) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(argv)
    assert exc.value.code == 2
