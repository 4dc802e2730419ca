"""
Unit tests for per-client connection handling.
"""

import socket
import time

import pytest

from restconf_server.core.connection import DRAIN_LIMIT, Connection, ConnectionState
from restconf_server.http.request import HTTPParseError


class StreamingSocket:
    """Socket stand-in whose peer never stops sending."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.received = 0
        self.closed = False

    def setblocking(self, flag):
        pass

    def settimeout(self, timeout):
        pass

    def shutdown(self, how):
        pass

    def recv(self, size):
        if self.delay:
            time.sleep(self.delay)
        self.received += size
        return b"x" * size

    def close(self):
        self.closed = True


@pytest.fixture
def pair():
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    client_side.close()
    server_side.close()


class TestReadRequest:
    """Tests for Connection.read_request()."""

    def test_reads_headers_and_body(self, pair):
        server_side, client_side = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 1), timeout=2.0)
        raw = b"POST /restconf/data HTTP/1.1\r\nContent-Length: 3\r\n\r\nabc"

        client_side.sendall(raw)

        assert conn.read_request() == raw
        assert conn.requests_handled == 1

    def test_keeps_pipelined_bytes(self, pair):
        server_side, client_side = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 1), timeout=2.0)
        first = b"GET /restconf HTTP/1.1\r\n\r\n"
        second = b"GET /restconf/data HTTP/1.1\r\n\r\n"

        client_side.sendall(first + second)

        assert conn.read_request() == first
        assert conn.read_request() == second

    def test_peer_close_returns_none(self, pair):
        server_side, client_side = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 1), timeout=2.0)

        client_side.shutdown(socket.SHUT_WR)

        assert conn.read_request() is None

    def test_oversized_request(self, pair):
        server_side, client_side = pair
        conn = Connection(
            socket=server_side,
            address=("127.0.0.1", 1),
            timeout=2.0,
            buffer_size=64,
            max_request_size=128,
        )

        client_side.sendall(b"GET / HTTP/1.1\r\nX-Pad: " + b"a" * 256)

        with pytest.raises(HTTPParseError) as exc_info:
            conn.read_request()

        assert exc_info.value.status_code == 413


class TestClose:
    """Tests for Connection.close()."""

    def test_drain_stops_at_byte_limit(self):
        sock = StreamingSocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 1))

        conn.close()

        assert sock.closed
        assert sock.received <= DRAIN_LIMIT
        assert conn.state == ConnectionState.CLOSED

    def test_drain_stops_at_time_limit(self):
        sock = StreamingSocket(delay=0.2)
        conn = Connection(socket=sock, address=("127.0.0.1", 1))

        start = time.monotonic()
        conn.close()

        assert time.monotonic() - start < 2.0
        assert sock.closed

    def test_close_is_idempotent(self):
        sock = StreamingSocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 1))

        conn.close()
        sock.received = 0
        conn.close()

        assert sock.received == 0
