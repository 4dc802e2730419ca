"""
=============================================================================
HTTP LAYER
=============================================================================

Everything between the TCP byte stream and the RESTCONF resources.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       raw bytes ──► HTTPRequest                          │
    │ dispatcher.py    HTTPRequest ──► route ──► handler ──► decoration   │
    │ response.py      HTTPResponse ──► raw bytes                         │
    │ media_types.py   Accept values the resources understand             │
    │ status_codes.py  HTTPStatus with reason phrases                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .status_codes import HTTPStatus
from .request import HTTPRequest, HTTPParseError, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    ok,
    error_response,
    bad_request,
    not_found,
    expectation_failed,
    internal_error,
)
from .dispatcher import Dispatcher, Route, Handler, clean_path
from . import media_types

__all__ = [
    "HTTPStatus",

    "HTTPRequest",
    "HTTPParseError",
    "RequestParser",
    "parse_request",

    "HTTPResponse",
    "ResponseBuilder",
    "format_http_date",
    "ok",
    "error_response",
    "bad_request",
    "not_found",
    "expectation_failed",
    "internal_error",

    "Dispatcher",
    "Route",
    "Handler",
    "clean_path",

    "media_types",
]
