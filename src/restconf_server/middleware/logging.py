"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

One log record per dispatched request on the "restconf_server.access" logger.

Text format (Apache-like, plus the Accept header that drove negotiation):

    10.0.0.7 - - [17/Oct/2026:12:00:00 +0000] "GET /restconf" 200 151
        "application/yang-data+xml" 0.41ms

JSON format (one object per line, for log shippers):

    {"request_id": "a1b2c3d4", "method": "GET", "path": "/restconf",
     "accept": "application/yang-data+xml", "status_code": 200, ...}

2xx responses are logged at the configured level; 4xx and 5xx at
WARNING, so a misconfigured client stands out in an INFO log.

Every response gets an X-Request-ID header with the id from the record,
so a client can quote it when reporting a problem.

=============================================================================
"""

from dataclasses import dataclass, asdict
from typing import Optional
import json
import logging
import time
import uuid

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger("restconf_server.access")


@dataclass
class RequestLog:
    """A single access-log record."""

    request_id: str
    method: str
    path: str
    accept: str
    client_ip: str
    user_agent: str
    status_code: int
    content_type: str
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} "{self.accept or "-"}" '
            f'{self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Access logging with request ids and timing.

    Args:
        log_format: "text" or "json".
        include_request_id: Add X-Request-ID to every response.
        log_level: Level for successful requests.
        skip_paths: Exact request paths that are never logged.
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        start = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.path} failed: "
                f"{type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000

        if self.include_request_id:
            response.headers["X-Request-ID"] = request_id

        if request.path in self.skip_paths:
            return response

        entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            accept=request.accept,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_type=response.content_type or "",
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        level = logging.WARNING if HTTPStatus(response.status).is_error else self.log_level
        if self.log_format == "json":
            logger.log(level, json.dumps(entry.to_dict()))
        else:
            logger.log(level, entry.to_text())

        return response
