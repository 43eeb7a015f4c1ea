"""A bounded FIFO queue guarded by a lock."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Iterable
from typing import Generic, TypeVar

T = TypeVar("T")

_log = logging.getLogger(__name__)


class ThreadSafeQueue(Generic[T]):
    """A FIFO queue safe to share between a producer and a consumer thread.

    A ``max_size`` of 0 means unbounded.
    """

    def __init__(self, max_size: int = 0) -> None:
        self.max_size = max_size
        self._items: deque[T] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _discard_oldest(self, count: int) -> None:
        count = min(count, len(self._items))
        _log.warning("queue has overflowed, discarding %d records", count)
        for _ in range(count):
            self._items.popleft()

    def push(self, value: T) -> None:
        """Append one value; on overflow the oldest ``max_size`` records are dropped."""
        with self._lock:
            if self.max_size > 0 and len(self._items) + 1 > self.max_size:
                self._discard_oldest(self.max_size)
            self._items.append(value)

    def extend(self, values: Iterable[T]) -> None:
        """Append many values, dropping the oldest records that would overflow."""
        batch = list(values)
        with self._lock:
            if self.max_size > 0:
                overflow = len(self._items) + len(batch) - self.max_size
                if overflow > 0:
                    self._discard_oldest(overflow)
            self._items.extend(batch)

    def pop(self, count: int) -> list[T]:
        """Remove and return up to ``count`` of the oldest values."""
        with self._lock:
            taken = min(count, len(self._items))
            return [self._items.popleft() for _ in range(taken)]