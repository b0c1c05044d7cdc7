from __future__ import annotations

import pytest
from pydantic import ValidationError

from fingers_crossed.core.activation import ChannelLevelActivationStrategy, ErrorLevelActivationStrategy
from fingers_crossed.core.config import FingersCrossedSettings, build_handler, resolve_settings
from fingers_crossed.core.handlers.fingers_crossed import FingersCrossedHandler
from fingers_crossed.core.models import Level


def test_settings_defaults() -> None:
    settings = FingersCrossedSettings()

    assert settings.action_level is Level.ERROR
    assert settings.buffer_limit == 0
    assert settings.stop_buffering is True
    assert settings.passthrough_level is None
    assert settings.activation_strategy() == ErrorLevelActivationStrategy(Level.ERROR)


def test_settings_parse_level_names() -> None:
    settings = FingersCrossedSettings(
        action_level="warning",
        passthrough_level="info",
        channel_levels={"sql": "notice"},
    )

    assert settings.action_level is Level.WARNING
    assert settings.passthrough_level is Level.INFO
    assert settings.activation_strategy() == ChannelLevelActivationStrategy(
        Level.WARNING, {"sql": Level.NOTICE}
    )


@pytest.mark.parametrize(
    "kwargs",
    [{"action_level": "verbose"}, {"buffer_limit": -1}, {"channel_levels": {"sql": "loud"}}],
)
def test_settings_reject_invalid_values(kwargs) -> None:
    with pytest.raises(ValidationError):
        FingersCrossedSettings(**kwargs)


def test_with_overrides_skips_none() -> None:
    base = FingersCrossedSettings(buffer_limit=10)

    assert base.with_overrides(action_level=None) is base
    changed = base.with_overrides(action_level="critical", buffer_limit=None)
    assert changed.action_level is Level.CRITICAL
    assert changed.buffer_limit == 10


def test_resolve_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("FINGERS_CROSSED_ACTION_LEVEL", "warning")
    monkeypatch.setenv("FINGERS_CROSSED_BUFFER_LIMIT", "25")
    monkeypatch.setenv("FINGERS_CROSSED_STOP_BUFFERING", "false")
    monkeypatch.setenv("FINGERS_CROSSED_PASSTHROUGH_LEVEL", "")

    settings = resolve_settings()

    assert settings.action_level is Level.WARNING
    assert settings.buffer_limit == 25
    assert settings.stop_buffering is False
    assert settings.passthrough_level is None


def test_resolve_settings_invalid_environment(monkeypatch) -> None:
    monkeypatch.setenv("FINGERS_CROSSED_BUFFER_LIMIT", "lots")
    with pytest.raises(ValidationError):
        resolve_settings()


def test_build_handler_from_settings(recorder, make_record) -> None:
    handler = build_handler(
        recorder,
        FingersCrossedSettings(action_level="warning", buffer_limit=2, stop_buffering=False),
    )

    assert isinstance(handler, FingersCrossedHandler)
    assert handler.buffer_limit == 2
    for m in ("a", "b", "c"):
        handler.handle(make_record(Level.INFO, m))
    handler.handle(make_record(Level.WARNING, "w"))

    assert recorder.messages == ["c", "w"]
