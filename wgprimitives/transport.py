"""Transport padding and the obfuscation "trick" packets sent before traffic."""

from __future__ import annotations

import secrets
from typing import Iterator, NamedTuple

__all__ = [
    "PADDING_MULTIPLE",
    "TrickPacket",
    "calculate_padding_size",
    "random_int",
    "trick_header",
    "trick_packets",
]

PADDING_MULTIPLE = 16

_T2_FIRST_BYTES = bytes((0xDC, 0xDE, 0xD3, 0xD9, 0xD0, 0xEC, 0xEE, 0xE3))
_T2_PREFIX = bytes((0x00, 0x00, 0x00, 0x01, 0x08))
_T2_SUFFIX = bytes((0x00, 0x00, 0x44, 0xD0))
_T2_RANDOM_LEN = 8

_MIN_PACKETS = 15
_MAX_PACKETS = 50
_MIN_EXTRA = 10
_MAX_EXTRA = 120
_MIN_DELAY_MS = 20
_MAX_DELAY_MS = 250


class TrickPacket(NamedTuple):
    """A junk datagram and how long to wait, in seconds, after sending it."""

    payload: bytes
    delay: float


def _round_up(size: int) -> int:
    return (size + PADDING_MULTIPLE - 1) & ~(PADDING_MULTIPLE - 1)


def calculate_padding_size(packet_size: int, mtu: int) -> int:
    """Zero bytes to append so the content is a multiple of 16, capped at ``mtu``.

    An ``mtu`` of zero means no cap.
    """
    last_unit = packet_size
    if mtu == 0:
        return _round_up(last_unit) - last_unit
    if last_unit > mtu:
        last_unit %= mtu
    padded = min(_round_up(last_unit), mtu)
    return padded - last_unit


def random_int(low: int, high: int) -> int:
    """A cryptographically random integer in ``[low, high)``; 0 for an empty range."""
    span = high - low
    if span < 1:
        return 0
    return low + secrets.randbelow(span)


def trick_header(trick: str) -> bytes | None:
    """The header prepended to every junk packet, or None if ``trick`` sends none."""
    if trick == "t1":
        return b""
    if trick == "t2":
        first = _T2_FIRST_BYTES[random_int(0, len(_T2_FIRST_BYTES) - 1)]
        return (
            bytes((first,))
            + _T2_PREFIX
            + secrets.token_bytes(_T2_RANDOM_LEN)
            + _T2_SUFFIX
        )
    return None


def trick_packets(trick: str) -> Iterator[TrickPacket]:
    """Yield the burst of randomly sized junk packets for ``trick``.

    Tricks without a header yield nothing.
    """
    header = trick_header(trick)
    if header is None:
        return
    count = random_int(_MIN_PACKETS, _MAX_PACKETS)
    max_len = len(header) + _MAX_EXTRA
    for _ in range(count):
        size = random_int(len(header) + _MIN_EXTRA, max_len)
        payload = header + secrets.token_bytes(size - len(header))
        delay = random_int(_MIN_DELAY_MS, _MAX_DELAY_MS) / 1000
        yield TrickPacket(payload, delay)