"""Object pools with an optional cap on outstanding items, and queue sizing."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, TypeVar

__all__ = [
    "MAX_SEGMENT_SIZE",
    "PREALLOCATED_BUFFERS_PER_POOL",
    "QUEUE_HANDSHAKE_SIZE",
    "QUEUE_INBOUND_SIZE",
    "QUEUE_OUTBOUND_SIZE",
    "WaitPool",
]

QUEUE_OUTBOUND_SIZE = 1024
QUEUE_INBOUND_SIZE = 1024
QUEUE_HANDSHAKE_SIZE = 1024
MAX_SEGMENT_SIZE = (1 << 16) - 1  # largest possible UDP datagram
PREALLOCATED_BUFFERS_PER_POOL = 0  # no cap: memory may grow without bound

T = TypeVar("T")


class WaitPool(Generic[T]):
    """A free list whose :meth:`get` blocks while ``max_count`` items are out.

    A ``max_count`` of zero disables the cap. New items come from ``factory``
    whenever the free list is empty.
    """

    def __init__(self, max_count: int, factory: Callable[[], T]) -> None:
        if max_count < 0:
            raise ValueError("max_count must not be negative")
        self._max = max_count
        self._factory = factory
        self._free: list[T] = []
        self._cond = threading.Condition()
        self._count = 0

    @property
    def max_count(self) -> int:
        """The cap on outstanding items; zero means unlimited."""
        return self._max

    @property
    def outstanding(self) -> int:
        """How many capped items are currently taken out of the pool."""
        with self._cond:
            return self._count

    def get(self) -> T:
        """Take an item, waiting while the cap is reached."""
        with self._cond:
            if self._max:
                while self._count >= self._max:
                    self._cond.wait()
                self._count += 1
            if self._free:
                return self._free.pop()
        return self._factory()

    def put(self, item: T) -> None:
        """Return an item to the pool and wake one waiting :meth:`get`."""
        with self._cond:
            self._free.append(item)
            if not self._max:
                return
            self._count -= 1
            self._cond.notify()

    @contextmanager
    def borrow(self) -> Iterator[T]:
        """Take an item for the duration of a ``with`` block."""
        item = self.get()
        try:
            yield item
        finally:
            self.put(item)