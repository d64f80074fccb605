"""Building blocks for a WireGuard-style tunnel: replay filter, TAI64N timestamps, rate limiting, cancelable I/O, configuration-socket helpers, pools, timers and transport padding."""

__version__ = "0.1.0"

__all__ = [
    "ipc",
    "pools",
    "ratelimiter",
    "replay",
    "rwcancel",
    "tai64n",
    "timers",
    "transport",
]