"""Token-bucket rate limiting of packets per source address."""

from __future__ import annotations

import ipaddress
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Union

__all__ = [
    "PACKETS_PER_SECOND",
    "PACKETS_BURSTABLE",
    "PACKET_COST",
    "MAX_TOKENS",
    "Ratelimiter",
]

PACKETS_PER_SECOND = 20
PACKETS_BURSTABLE = 5
GARBAGE_COLLECT_TIME = 1_000_000_000
PACKET_COST = 1_000_000_000 // PACKETS_PER_SECOND
MAX_TOKENS = PACKET_COST * PACKETS_BURSTABLE

_GC_INTERVAL = 1.0

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass
class _Entry:
    last_time: int
    tokens: int
    lock: threading.Lock = field(default_factory=threading.Lock)


class Ratelimiter:
    """Allows a short burst per address, then a steady packet rate.

    ``clock`` returns the current time in nanoseconds. A background thread
    drops idle entries once a second while the table is not empty.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock if clock is not None else time.monotonic_ns
        self._lock = threading.Lock()
        self._table: dict[Address, _Entry] = {}
        self._wake = threading.Event()
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._collect_garbage, name="ratelimiter-gc", daemon=True
        )
        self._thread.start()

    def __enter__(self) -> Ratelimiter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _collect_garbage(self) -> None:
        while True:
            self._wake.wait()
            self._wake.clear()
            if self._stop.is_set():
                return
            while not self._stop.wait(_GC_INTERVAL):
                if self.cleanup():
                    break
            if self._stop.is_set():
                return

    def cleanup(self) -> bool:
        """Drop entries idle for over a second; return whether the table is empty."""
        with self._lock:
            for key, entry in list(self._table.items()):
                with entry.lock:
                    if self._clock() - entry.last_time > GARBAGE_COLLECT_TIME:
                        del self._table[key]
            return not self._table

    def allow(self, ip: str | Address) -> bool:
        """Whether a packet from ``ip`` may pass now."""
        addr = ipaddress.ip_address(ip)
        with self._lock:
            entry = self._table.get(addr)

        if entry is None:
            entry = _Entry(last_time=self._clock(), tokens=MAX_TOKENS - PACKET_COST)
            with self._lock:
                self._table[addr] = entry
                if len(self._table) == 1:
                    self._wake.set()
            return True

        with entry.lock:
            now = self._clock()
            entry.tokens = min(entry.tokens + now - entry.last_time, MAX_TOKENS)
            entry.last_time = now
            if entry.tokens > PACKET_COST:
                entry.tokens -= PACKET_COST
                return True
            return False

    def close(self) -> None:
        """Stop the background garbage collector."""
        self._stop.set()
        self._wake.set()
        self._thread.join(timeout=2 * _GC_INTERVAL)