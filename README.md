# wgprimitives

Self-contained building blocks for a WireGuard-style tunnel. The package is
plain Python with no third-party dependencies. Some parts (`rwcancel`,
`uapi_open`) need a POSIX system.

## What is inside

| Module | Provides |
| --- | --- |
| `wgprimitives.replay` | `ReplayFilter` with `reset()` and `validate_counter(counter, limit)`: the sliding-window anti-replay filter of RFC 6479. `WINDOW_SIZE` is the window width. |
| `wgprimitives.tai64n` | `Timestamp`, `stamp(seconds, nanoseconds)`, `now()`: 12-byte TAI64N labels whose low nanosecond bits are whitened. `Timestamp.after()` compares two labels and `Timestamp.to_unix()` decodes one. |
| `wgprimitives.ratelimiter` | `Ratelimiter`: a per-address token bucket. It allows a burst of 5 packets and then 20 per second. Its clock can be injected, and a background thread discards idle entries. |
| `wgprimitives.rwcancel` | `RWCancel`, `retry_after_error()`: reads and writes on a non-blocking descriptor. They wait until the descriptor is ready, and `cancel()` from another thread ends the wait. |
| `wgprimitives.ipc` | `IPCError`, `IpcErrorCode`, `sock_path()`, `uapi_open()`, `parse_reserved()`, `format_key()`: error codes, socket creation and value formats for the configuration socket |
| `wgprimitives.pools` | `WaitPool` with `get()`, `put()` and the `borrow()` context manager: a free list that can block while too many items are out. It also holds the queue-size constants. |
| `wgprimitives.timers` | `Timer` with `mod()`, `delete()`, `delete_sync()`, `is_pending()`, and `jitter()`: one-shot timers that can be re-armed |
| `wgprimitives.transport` | `calculate_padding_size()`, `random_int()`, `trick_header()`, `trick_packets()`: transport padding and bursts of decoy packets |

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Examples

Rejecting replayed counters:

```python
from wgprimitives.replay import ReplayFilter

limit = 2**64 - 2**13 - 1
window = ReplayFilter()
assert window.validate_counter(5, limit)
assert not window.validate_counter(5, limit)  # seen before
```

Comparing handshake timestamps. A gap of 20 ms survives the whitening and a
gap of 10 ms does not:

```python
from wgprimitives.tai64n import stamp

earlier = stamp(0, 123_456_789)
assert stamp(0, 143_456_789).after(earlier)
assert not stamp(0, 133_456_789).after(earlier)
```

Rate limiting by source address. Here the clock is injected and advances by
one nanosecond per reading:

```python
import itertools
from wgprimitives.ratelimiter import Ratelimiter

with Ratelimiter(clock=itertools.count().__next__) as limiter:
    allowed = [limiter.allow("192.0.2.1") for _ in range(6)]
assert allowed == [True] * 5 + [False]
```

Borrowing a buffer from a pool with at most two items out at a time:

```python
from wgprimitives.pools import WaitPool

pool = WaitPool(2, lambda: bytearray(2048))
with pool.borrow() as buf:
    buf[0] = 1
```

Padding a transport payload:

```python
from wgprimitives.transport import calculate_padding_size

assert calculate_padding_size(17, 1420) == 15
```

Parsing configuration values:

```python
from wgprimitives.ipc import IPCError, IpcErrorCode, parse_reserved

assert parse_reserved("1,2,3") == b"\x01\x02\x03"
try:
    parse_reserved("1,2")
except IPCError as err:
    assert err.code == IpcErrorCode.INVALID
```

## What this package does not do

These are separate parts. They are not a working tunnel. The package has no
tunnel device, no Noise handshake, no encryption of transport packets, no
peer or allowed-IP table, and no command-line program. `uapi_open()` creates
the listening control socket and `ipc` provides error codes and value
formats, but the package does not read or answer `get`/`set` requests.

## Running the tests

```
pytest
```