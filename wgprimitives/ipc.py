"""Configuration-protocol error codes, socket setup and value formats."""

from __future__ import annotations

import errno
import os
import re
import socket
from enum import IntEnum

__all__ = [
    "DEFAULT_SOCKET_DIRECTORY",
    "IPCError",
    "IpcErrorCode",
    "format_key",
    "parse_reserved",
    "sock_path",
    "uapi_open",
]

DEFAULT_SOCKET_DIRECTORY = "/var/run/wireguard"
KEY_SIZE = 32

_DECIMAL = re.compile(r"[+-]?[0-9]+")


class IpcErrorCode(IntEnum):
    """Negated errno values reported as ``errno=`` in protocol replies."""

    IO = -errno.EIO
    PROTOCOL = -errno.EPROTO
    INVALID = -errno.EINVAL
    PORT_IN_USE = -errno.EADDRINUSE
    UNKNOWN = -55  # ENOANO


class IPCError(Exception):
    """A configuration-protocol failure carrying its wire error code."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message)
        self.code = int(code)
        self.message = message

    def __str__(self) -> str:
        return f"IPC error {self.code}: {self.message}"


def sock_path(iface: str, directory: str = DEFAULT_SOCKET_DIRECTORY) -> str:
    """Path of the control socket for interface ``iface``."""
    return f"{directory}/{iface}.sock"


def _listen(path: str) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(path)
        sock.listen()
    except OSError:
        sock.close()
        raise
    return sock


def _in_use(path: str) -> bool:
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
        try:
            probe.connect(path)
        except OSError:
            return False
    return True


def uapi_open(name: str, directory: str = DEFAULT_SOCKET_DIRECTORY) -> socket.socket:
    """Create and listen on the control socket for ``name``.

    A stale socket file left by a dead process is removed and replaced;
    a socket that still accepts connections raises :class:`OSError`.
    """
    os.makedirs(directory, mode=0o755, exist_ok=True)
    path = sock_path(name, directory)

    old_umask = os.umask(0o077)
    try:
        try:
            return _listen(path)
        except OSError:
            pass
        if _in_use(path):
            raise OSError(errno.EADDRINUSE, "unix socket in use", path)
        os.remove(path)
        return _listen(path)
    finally:
        os.umask(old_umask)


def parse_reserved(value: str) -> bytes:
    """Parse a ``reserved`` value of three comma-separated bytes."""
    parts = value.split(",")
    if len(parts) != 3:
        raise IPCError(IpcErrorCode.INVALID, f"invalid reserved value: {value}")
    result = bytearray()
    for part in parts:
        if not _DECIMAL.fullmatch(part):
            raise IPCError(IpcErrorCode.INVALID, f"invalid reserved value: {value}")
        parsed = int(part)
        if not 0 <= parsed <= 0xFF:
            raise IPCError(IpcErrorCode.INVALID, f"invalid reserved value: {value}")
        result.append(parsed)
    return bytes(result)


def format_key(prefix: str, key: bytes) -> str:
    """Render a 32-byte key as a ``prefix=<lowercase hex>`` protocol line."""
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    return f"{prefix}={bytes(key).hex()}\n"