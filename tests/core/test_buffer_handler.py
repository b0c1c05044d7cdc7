from __future__ import annotations

from fingers_crossed.core.handlers.buffer import BufferHandler
from fingers_crossed.core.handlers.recording import RecordingHandler
from fingers_crossed.core.models import Level


def test_buffer_handler_flushes_on_demand(spy, make_record) -> None:
    handler = BufferHandler(spy)
    handler.handle(make_record(Level.INFO, "a"))
    handler.handle(make_record(Level.ERROR, "b"))
    assert spy.calls == []

    handler.flush()

    assert [[r.message for r in b] for b in spy.batches] == [["a", "b"]]
    assert handler.buffered == []

    handler.flush()
    assert len(spy.calls) == 1


def test_buffer_handler_drops_oldest_by_default(spy, make_record) -> None:
    handler = BufferHandler(spy, buffer_limit=2)
    for m in "abcd":
        handler.handle(make_record(Level.INFO, m))
    handler.close()

    assert [r.message for r in spy.batches[0]] == ["c", "d"]
    assert spy.closed == 1


def test_buffer_handler_flush_on_overflow(spy, make_record) -> None:
    handler = BufferHandler(spy, buffer_limit=2, flush_on_overflow=True)
    for m in "abcde":
        handler.handle(make_record(Level.INFO, m))

    assert [[r.message for r in b] for b in spy.batches] == [["a", "b"], ["c", "d"]]
    assert [r.message for r in handler.buffered] == ["e"]


def test_buffer_handler_level_filter(spy, make_record) -> None:
    handler = BufferHandler(spy, level=Level.WARNING)

    assert handler.handle(make_record(Level.INFO)) is False
    handler.handle(make_record(Level.WARNING, "kept"))
    handler.flush()

    assert spy.messages == ["kept"]


def test_set_handler_keeps_buffered_records(make_record) -> None:
    first = RecordingHandler()
    second = RecordingHandler()
    handler = BufferHandler(first)
    handler.handle(make_record(Level.INFO, "pending"))

    handler.set_handler(second)
    handler.flush()

    assert first.records == []
    assert second.messages == ["pending"]
    assert handler.handler is second


def test_clear_discards_without_forwarding(spy, make_record) -> None:
    handler = BufferHandler(spy)
    handler.handle(make_record(Level.INFO))
    handler.clear()
    handler.flush()

    assert spy.calls == []


def test_reset_flushes_and_resets_sink(spy, make_record) -> None:
    handler = BufferHandler(spy)
    handler.handle(make_record(Level.INFO, "pending"))

    handler.reset()

    assert spy.messages == ["pending"]
    assert spy.resets == 1


def test_context_manager_closes(spy, make_record) -> None:
    with BufferHandler(spy) as handler:
        handler.handle(make_record(Level.INFO, "inside"))

    assert spy.messages == ["inside"]
    assert spy.closed == 1
