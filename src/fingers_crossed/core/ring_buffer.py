"""Bounded FIFO buffer of records."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from .errors import HandlerConfigError
from .models import Record


def validate_buffer_limit(limit: int) -> int:
    """Return the limit if it is a non-negative integer (0 = unbounded)."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise HandlerConfigError(f"buffer_limit must be an integer, got {limit!r}")
    if limit < 0:
        raise HandlerConfigError("buffer_limit must be >= 0")
    return limit


class BoundedRingBuffer:
    """FIFO of records that drops the oldest entry once ``limit`` is reached.

    A limit of 0 means unbounded. The buffer itself is not locked; the owning
    handler serializes access to it.
    """

    __slots__ = ("_limit", "_items")

    def __init__(self, limit: int = 0) -> None:
        self._limit = validate_buffer_limit(limit)
        self._items: deque[Record] = self._new_deque()

    def _new_deque(self) -> deque[Record]:
        return deque(maxlen=self._limit or None)

    @property
    def limit(self) -> int:
        return self._limit

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._items)

    def is_full(self) -> bool:
        return self._limit > 0 and len(self._items) >= self._limit

    def append(self, record: Record) -> Record | None:
        """Append a record and return the one dropped to make room, if any."""
        dropped = self._items[0] if self.is_full() else None
        self._items.append(record)
        return dropped

    def drain(self) -> list[Record]:
        """Swap in an empty buffer and return the previous contents in order."""
        items, self._items = self._items, self._new_deque()
        return list(items)

    def clear(self) -> None:
        self._items = self._new_deque()

    def snapshot(self) -> list[Record]:
        return list(self._items)
