"""TAI64N timestamps with whitened sub-second precision."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

__all__ = ["TIMESTAMP_SIZE", "Timestamp", "now", "stamp"]

TIMESTAMP_SIZE = 12
_BASE = 0x400000000000000A
_WHITENER_MASK = 0x1000000 - 1
_U64 = 1 << 64
_NS_PER_SECOND = 1_000_000_000
_LAYOUT = struct.Struct(">QI")


@dataclass(frozen=True, order=False)
class Timestamp:
    """A 12-byte big-endian TAI64N label."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != TIMESTAMP_SIZE:
            raise ValueError(
                f"timestamp must be {TIMESTAMP_SIZE} bytes, got {len(self.data)}"
            )

    def after(self, other: Timestamp) -> bool:
        """Whether this timestamp is strictly later than ``other``."""
        return self.data > other.data

    def to_unix(self) -> tuple[int, int]:
        """Return the (seconds, nanoseconds) Unix time this label encodes."""
        secs, nano = _LAYOUT.unpack(self.data)
        unix = (secs - _BASE) % _U64
        if unix >= 1 << 63:
            unix -= _U64
        return unix, nano

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        seconds, nanos = self.to_unix()
        moment = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(
            seconds=seconds, microseconds=nanos // 1000
        )
        return moment.isoformat()


def stamp(seconds: int, nanoseconds: int = 0) -> Timestamp:
    """Build a timestamp for a Unix time, whitening the low nanosecond bits."""
    extra, nanos = divmod(nanoseconds, _NS_PER_SECOND)
    secs = (_BASE + seconds + extra) % _U64
    nanos &= ~_WHITENER_MASK
    return Timestamp(_LAYOUT.pack(secs, nanos))


def now() -> Timestamp:
    """Timestamp for the current wall-clock time."""
    seconds, nanos = divmod(time.time_ns(), _NS_PER_SECOND)
    return stamp(seconds, nanos)