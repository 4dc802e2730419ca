"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them for the socket.

=============================================================================
A RESTCONF RESPONSE ON THE WIRE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │  HTTP/1.1 200 OK\r\n                           ← status line        │
    │  Content-Type: application/yang-data+json\r\n  ← negotiated type    │
    │  Server: RESTCONF\r\n                          ← set by dispatcher  │
    │  Date: Sat, 17 Oct 2026 12:00:00 GMT\r\n       ← set by dispatcher  │
    │  Content-Length: 41\r\n                        ← auto-calculated    │
    │  \r\n                                                               │
    │  {"yang-library-version": "2016-06-21"}        ← encoder output     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR RESPONSES
=============================================================================

RESTCONF errors here are short plain-text bodies, the same shape as Go's
http.Error():

    HTTP/1.1 400 Bad Request
    Content-Type: text/plain; charset=utf-8
    X-Content-Type-Options: nosniff

    Accept is incorrect!

Use error_response() and the named helpers below instead of assembling
these by hand, so every error carries the same headers.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Union

from .status_codes import HTTPStatus


PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes

    A bare HTTPResponse() is an empty 200, which is what the data and
    operations placeholders answer with.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        return f"{self.version} {self.status.value} {self.status.phrase}"

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header (overwrites); returns self for chaining."""
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body, encoding strings as UTF-8."""
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def to_bytes(self, server_name: str = "RESTCONF", include_body: bool = True) -> bytes:
        """
        Serialize for socket.sendall().

        Content-Length, Date and Server are filled in when missing.
        With include_body=False (HEAD) only the head is written, but
        Content-Length still describes the body a GET would get.
        Responses that went through the dispatcher already carry Date and
        Server; the fallbacks cover transport-level errors (400/413/503)
        that never reach it.
        """
        response_headers = dict(self.headers)

        if "Content-Length" not in response_headers:
            response_headers["Content-Length"] = str(len(self.body))

        if "Date" not in response_headers:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))

        if "Server" not in response_headers:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        if not include_body:
            return header_bytes
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (
            ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type(YANG_DATA_XML)
            .body(encoded)
            .build()
        )

    Each method returns the builder so calls chain; build() hands back the
    finished HTTPResponse.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = PLAIN_TEXT) -> "ResponseBuilder":
        """Plain-text body with matching Content-Type."""
        return self.content_type(content_type).body(text)

    def no_sniff(self) -> "ResponseBuilder":
        """Tell browsers not to guess a different type for the body."""
        return self.header("X-Content-Type-Options", "nosniff")

    def keep_alive(self, timeout: int = 5, max_requests: int = 100) -> "ResponseBuilder":
        self._headers["Connection"] = "keep-alive"
        self._headers["Keep-Alive"] = f"timeout={timeout}, max={max_requests}"
        return self

    def close_connection(self) -> "ResponseBuilder":
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231 IMF-fixdate).

        Sat, 17 Oct 2026 12:00:00 GMT

    HTTP dates are always GMT. The names are spelled out instead of using
    strftime() so the result does not depend on the process locale.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    dt = dt.astimezone(timezone.utc) if dt.tzinfo else dt

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# ─────────────────────────────────────────────────────────────────────────────
# Convenience functions
# ─────────────────────────────────────────────────────────────────────────────

def ok(body: Union[str, bytes] = b"", content_type: Optional[str] = None) -> HTTPResponse:
    """
    200 OK with the body sent verbatim.

    Encoders produce bytes already, so unlike error_response() no
    Content-Type is guessed: pass the negotiated media type.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK).body(body)
    if content_type:
        builder.content_type(content_type)
    return builder.build()


def error_response(status: HTTPStatus, message: str) -> HTTPResponse:
    """Plain-text error: message plus a trailing newline, nosniff set."""
    return (
        ResponseBuilder()
        .status(status)
        .text(message + "\n")
        .no_sniff()
        .build()
    )


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    return error_response(HTTPStatus.BAD_REQUEST, message)


def not_found(message: str = "404 page not found") -> HTTPResponse:
    return error_response(HTTPStatus.NOT_FOUND, message)


def expectation_failed(message: str = "Expectation Failed") -> HTTPResponse:
    """417, the status used when a resource cannot be serialized."""
    return error_response(HTTPStatus.EXPECTATION_FAILED, message)


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)
