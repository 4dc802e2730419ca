"""
pytest configuration and fixtures.
"""

import socket
import threading
from datetime import datetime, timezone
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from restconf_server import RestconfServer, ServerConfig
from restconf_server.http import Dispatcher, HTTPRequest
from restconf_server.resources import ResourceHandlers


FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_get_request() -> bytes:
    """GET of the RESTCONF root asking for JSON."""
    return (
        b"GET /restconf?depth=1 HTTP/1.1\r\n"
        b"Host: router1:408\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/yang-data+json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """POST with a body to the data placeholder."""
    body = b'{"base:system": {"hostname": "r1"}}'
    return (
        b"POST /restconf/data HTTP/1.1\r\n"
        b"Host: router1:408\r\n"
        b"Content-Type: application/yang-data+json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"Connection: close\r\n"
        + b"\r\n"
        + body
    )


def make_request(path: str, accept: str = "", method: str = "GET") -> HTTPRequest:
    headers = {"accept": accept} if accept else {}
    return HTTPRequest(method=method, path=path, headers=headers)


@pytest.fixture
def request_factory():
    """Build an HTTPRequest without going through the parser."""
    return make_request


@pytest.fixture
def clock():
    """Clock pinned to FIXED_NOW, for deterministic Date headers."""
    return lambda: FIXED_NOW


@pytest.fixture
def dispatcher() -> Dispatcher:
    """Frozen dispatcher with the RESTCONF resources and a fixed clock."""
    d = Dispatcher(clock=lambda: FIXED_NOW)
    ResourceHandlers().register_all(d)
    d.freeze()
    return d


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=8408,
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class LiveServer:
    """RestconfServer running in a background thread."""

    def __init__(self, server: RestconfServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes on a fresh connection and read until close."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(8192)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def get(self, path: str, accept: str = "", method: str = "GET") -> bytes:
        lines = [f"{method} {path} HTTP/1.1", "Host: localhost", "Connection: close"]
        if accept:
            lines.append(f"Accept: {accept}")
        return self.request(("\r\n".join(lines) + "\r\n\r\n").encode())


@pytest.fixture
def live_server(free_port: int) -> Generator[LiveServer, None, None]:
    """A running RESTCONF server on a free local port."""
    server = RestconfServer(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        min_workers=2,
        max_workers=4,
        keep_alive_timeout=1.0,
        log_level="WARNING",
    ))

    srv = LiveServer(server, free_port)
    srv.start()

    yield srv

    srv.stop()
