from __future__ import annotations

import pytest

from fingers_crossed.core.errors import HandlerConfigError
from fingers_crossed.core.models import Level
from fingers_crossed.core.ring_buffer import BoundedRingBuffer


def test_bounded_buffer_drops_oldest_and_keeps_order(make_record) -> None:
    buf = BoundedRingBuffer(3)
    records = [make_record(Level.DEBUG, f"r{i}") for i in range(5)]

    dropped = [buf.append(r) for r in records]

    assert [d.message if d else None for d in dropped] == [None, None, None, "r0", "r1"]
    assert [r.message for r in buf] == ["r2", "r3", "r4"]
    assert buf.is_full()


def test_unbounded_buffer_never_drops(make_record) -> None:
    buf = BoundedRingBuffer(0)
    for i in range(100):
        assert buf.append(make_record(message=str(i))) is None
    assert len(buf) == 100
    assert not buf.is_full()


def test_drain_swaps_in_empty_buffer(make_record) -> None:
    buf = BoundedRingBuffer(2)
    buf.append(make_record(message="a"))
    buf.append(make_record(message="b"))

    batch = buf.drain()

    assert [r.message for r in batch] == ["a", "b"]
    assert len(buf) == 0
    assert buf.drain() == []
    assert buf.limit == 2


@pytest.mark.parametrize("limit", [-1, 2.5, "10", True])
def test_invalid_limit_is_a_config_error(limit) -> None:
    with pytest.raises(HandlerConfigError):
        BoundedRingBuffer(limit)
