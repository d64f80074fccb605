"""Cancelable reads and writes on a non-blocking file descriptor."""

from __future__ import annotations

import errno
import os
import select

__all__ = ["RWCancel", "retry_after_error"]


def retry_after_error(err: BaseException) -> bool:
    """Whether ``err`` means the operation should simply be retried."""
    return isinstance(err, OSError) and err.errno in (errno.EAGAIN, errno.EINTR)


def _closed_error() -> OSError:
    return OSError(errno.EBADF, "file already closed")


class RWCancel:
    """Wraps a descriptor so blocked reads can be woken by :meth:`cancel`.

    The descriptor is switched to non-blocking mode; it is not closed by
    :meth:`close`, which releases only the internal cancellation pipe.
    """

    def __init__(self, fd: int) -> None:
        os.set_blocking(fd, False)
        self.fd = fd
        self._closing_reader, self._closing_writer = os.pipe()

    def __enter__(self) -> RWCancel:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _ready(self, event: int) -> bool:
        poller = select.poll()
        poller.register(self.fd, event)
        poller.register(self._closing_reader, event)
        while True:
            try:
                ready = dict(poller.poll())
                break
            except OSError as err:
                if not retry_after_error(err):
                    return False
        if ready.get(self._closing_reader, 0):
            return False
        return bool(ready.get(self.fd, 0))

    def ready_read(self) -> bool:
        """Block until the descriptor is readable; False once cancelled."""
        return self._ready(select.POLLIN)

    def ready_write(self) -> bool:
        """Block until the descriptor is writable; False on cancellation or error."""
        return self._ready(select.POLLOUT)

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, waiting if none are available."""
        while True:
            try:
                return os.read(self.fd, size)
            except OSError as err:
                if not retry_after_error(err):
                    raise
            if not self.ready_read():
                raise _closed_error()

    def write(self, data: bytes) -> int:
        """Write ``data``, waiting while the descriptor is full."""
        while True:
            try:
                return os.write(self.fd, data)
            except OSError as err:
                if not retry_after_error(err):
                    raise
            if not self.ready_write():
                raise _closed_error()

    def cancel(self) -> None:
        """Wake any pending and future waits for readability."""
        os.write(self._closing_writer, b"\x00")

    def close(self) -> None:
        """Release the cancellation pipe."""
        for fd in (self._closing_reader, self._closing_writer):
            try:
                os.close(fd)
            except OSError:
                pass