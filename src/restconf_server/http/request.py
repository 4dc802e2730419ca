"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one HTTP/1.1 request into an HTTPRequest.
Implements the parts of RFC 7230 a RESTCONF server needs.

=============================================================================
WHAT A RESTCONF REQUEST LOOKS LIKE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │  GET /restconf/yang-library-version HTTP/1.1\r\n    ← request line  │
    │  Host: router1.example.com\r\n                      ← headers       │
    │  Accept: application/yang-data+json\r\n                             │
    │  \r\n                                               ← separator     │
    │                                                     ← (no body)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The Accept header is the only header the resources look at: it selects
between the XML and JSON encodings. Everything else is parsed so the
transport can make keep-alive and body-length decisions.

=============================================================================
PATH HANDLING
=============================================================================

The path is handed to the dispatcher exactly as the client sent it
(percent-decoded, query string removed). The dispatcher cleans "." and
".." segments itself, so the parser does NOT reject traversal attempts:

    GET /restconf/../restconf/./data HTTP/1.1
        └─────────────┬────────────┘
                      └─► dispatcher cleans to /restconf/data

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict
from urllib.parse import parse_qs, urlsplit, unquote
import re

from .status_codes import HTTPStatus


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Carries the status the connection loop should answer with before it
    closes the connection:

        400 Bad Request                - malformed syntax
        405 Method Not Allowed         - unknown method token
        413 Payload Too Large          - request exceeds size limit
        505 HTTP Version Not Supported - not HTTP/1.0 or HTTP/1.1
    """

    def __init__(self, message: str, status_code: HTTPStatus = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Header names are stored lowercase, so lookups are case-insensitive
    as RFC 7230 requires ("Accept" and "accept" are the same header).

        method:         GET, POST, PUT, ...
        path:           path without query string, NOT yet cleaned
        version:        "HTTP/1.1" or "HTTP/1.0"
        headers:        lowercase name → value (repeats joined with ", ")
        header_values:  lowercase name → one value per header line
        query_params:   "?depth=1" → {"depth": ["1"]}
        body:           raw body bytes (Content-Length bytes)
        client_address: (ip, port) of the peer, for the access log
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    header_values: Dict[str, list[str]] = field(default_factory=dict, repr=False)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    client_address: tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def accept(self) -> str:
        """
        The first Accept header line, verbatim.

        RESTCONF resources compare this against their supported media
        types with an exact string match, so no normalization is done.
        When Accept is repeated, the first line counts.
        """
        return self.get_first("accept")

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type without parameters ("; charset=..." stripped)."""
        ct = self.headers.get("content-type", "")
        return ct.split(";")[0].strip().lower() or None

    @property
    def content_length(self) -> int:
        try:
            return int(self.headers.get("content-length", 0))
        except ValueError:
            return 0

    @property
    def host(self) -> str:
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_keep_alive(self) -> bool:
        """
        Should the connection stay open after this response?

            HTTP/1.1: yes, unless "Connection: close"
            HTTP/1.0: no, unless "Connection: keep-alive"
        """
        connection = self.headers.get("connection", "").lower()

        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_first(self, name: str, default: str = "") -> str:
        """Value of the first line of a header that may be repeated."""
        values = self.header_values.get(name.lower())
        if values:
            return values[0]
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter, or default."""
        values = self.query_params.get(name, [])
        return values[0] if values else default


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

        raw bytes
           │
           ├──► size check ............ too big? → 413
           ├──► split at \\r\\n\\r\\n ..... missing? → 400
           ├──► request line .......... bad method? → 405, bad version? → 505
           ├──► headers ............... lowercase names, repeats comma-joined
           └──► body .................. exactly Content-Length bytes
    """

    VALID_METHODS = {
        "GET", "POST", "PUT", "DELETE", "PATCH",
        "HEAD", "OPTIONS", "TRACE", "CONNECT",
    }

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one complete request.

        Args:
            data: Raw request bytes as read by Connection.read_request().
            client_address: Peer (ip, port), copied onto the request.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=HTTPStatus.PAYLOAD_TOO_LARGE,
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, path, query_params, version = self._parse_request_line(lines[0])
        header_values = self._parse_headers(lines[1:])
        headers = {name: ", ".join(values) for name, values in header_values.items()}

        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError(
                f"Invalid Content-Length: {headers['content-length']}"
            ) from None

        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            header_values=header_values,
            query_params=query_params,
            body=body[:content_length],
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, Dict[str, list[str]], str]:
        """
        Split "METHOD SP REQUEST-TARGET SP VERSION".

        Origin-form targets ("/restconf?depth=1") are split by hand:
        urlsplit() would read "//restconf" as a network location, and the
        dispatcher needs to see the doubled slash so it can clean it.
        Absolute-form targets ("http://host/restconf") go through urlsplit.
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, target, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(
                f"Invalid method: {method}",
                status_code=HTTPStatus.METHOD_NOT_ALLOWED,
            )

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=HTTPStatus.HTTP_VERSION_NOT_SUPPORTED,
            )

        if target.startswith("/"):
            raw_path, _, query = target.partition("?")
        else:
            parts = urlsplit(target)
            raw_path, query = parts.path, parts.query

        path = unquote(raw_path) or "/"
        query_params = parse_qs(query, keep_blank_values=True)

        return method, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, list[str]]:
        """
        Parse "Name: value" lines into lowercase name -> values, one entry
        per header line in arrival order.

        Obsolete line folding (continuation lines starting with SP/HT) is
        joined onto the previous header line. The caller combines repeats
        with ", " per RFC 7230 section 3.2.2.
        """
        headers: Dict[str, list[str]] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name][-1] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue  # lenient: skip malformed header lines

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            headers.setdefault(name, []).append(value)

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 1024 * 1024
) -> HTTPRequest:
    """One-shot helper around RequestParser.parse()."""
    return RequestParser(max_request_size=max_size).parse(data, client_address)
