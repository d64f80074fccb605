import errno
import os
import shutil
import socket
import stat
import tempfile

import pytest

from wgprimitives.ipc import (
    IPCError,
    IpcErrorCode,
    format_key,
    parse_reserved,
    sock_path,
    uapi_open,
)


@pytest.fixture
def short_dir():
    # Unix socket paths are length-limited; keep the directory short.
    path = tempfile.mkdtemp(prefix="wg", dir="/tmp")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


def test_ipc_error_carries_code_and_message():
    err = IPCError(IpcErrorCode.INVALID, "bad value")
    assert err.code == -errno.EINVAL
    assert err.message == "bad value"
    assert str(err) == f"IPC error {-errno.EINVAL}: bad value"


def test_error_codes_are_negated_errno():
    assert IPCError(IpcErrorCode.IO, "x").code == -errno.EIO
    assert IPCError(IpcErrorCode.PORT_IN_USE, "x").code == -errno.EADDRINUSE
    assert IPCError(IpcErrorCode.PROTOCOL, "x").code == -errno.EPROTO
    assert IPCError(IpcErrorCode.UNKNOWN, "x").code == -55


def test_sock_path_default_directory():
    assert sock_path("wg0") == "/var/run/wireguard/wg0.sock"


def test_sock_path_custom_directory():
    assert sock_path("tun", "/tmp/x") == "/tmp/x/tun.sock"


def test_parse_reserved_valid():
    assert parse_reserved("1,2,3") == bytes([1, 2, 3])
    assert parse_reserved("0,255,0") == bytes([0, 255, 0])


@pytest.mark.parametrize(
    "value", ["1,2", "1,2,3,4", "1,2,256", "-1,0,0", "a,b,c", "1, 2,3", ""]
)
def test_parse_reserved_rejects(value):
    with pytest.raises(IPCError) as info:
        parse_reserved(value)
    assert info.value.code == IpcErrorCode.INVALID
    assert info.value.message == f"invalid reserved value: {value}"


def test_format_key_zero():
    assert format_key("private_key", bytes(32)) == "private_key=" + "0" * 64 + "\n"


def test_format_key_round_trip():
    key = bytes(range(32))
    line = format_key("public_key", key)
    prefix, _, rest = line.partition("=")
    assert prefix == "public_key"
    assert rest.endswith("\n")
    assert bytes.fromhex(rest.strip()) == key
    assert rest.strip() == rest.strip().lower()


def test_format_key_wrong_length():
    with pytest.raises(ValueError):
        format_key("public_key", bytes(31))


def test_uapi_open_creates_listening_socket(short_dir):
    directory = os.path.join(short_dir, "run")
    listener = uapi_open("wg0", directory)
    try:
        path = sock_path("wg0", directory)
        mode = os.stat(path).st_mode
        assert stat.S_ISSOCK(mode)
        assert mode & 0o077 == 0
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
            client.connect(path)
            conn, _ = listener.accept()
            with conn:
                client.sendall(b"get=1\n")
                assert conn.recv(16) == b"get=1\n"
    finally:
        listener.close()


def test_uapi_open_replaces_stale_file(short_dir):
    path = sock_path("wg1", short_dir)
    with open(path, "w") as handle:
        handle.write("stale")
    listener = uapi_open("wg1", short_dir)
    try:
        assert listener.getsockname() == path
        assert stat.S_ISSOCK(os.stat(path).st_mode)
    finally:
        listener.close()


def test_uapi_open_refuses_socket_in_use(short_dir):
    listener = uapi_open("wg2", short_dir)
    try:
        with pytest.raises(OSError) as info:
            uapi_open("wg2", short_dir)
        assert info.value.errno == errno.EADDRINUSE
    finally:
        listener.close()