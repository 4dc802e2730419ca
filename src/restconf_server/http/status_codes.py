"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes a RESTCONF server actually emits, with their reason
phrases (RFC 7231, RFC 8040 section 7).

=============================================================================
WHERE EACH CODE COMES FROM
=============================================================================

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ Resource encoded and returned                            │
    │        │ (also the empty answer of the data/operations stubs)     │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  400   │ Wrong method on host-meta, or an Accept header the       │
    │        │ resource cannot produce                                  │
    │  404   │ No registered route is an exact or prefix match          │
    │  405   │ Request line carries an unknown method                   │
    │  408   │ Client connected but never finished its request          │
    │  413   │ Request larger than max_request_size                     │
    │  417   │ A resource failed to serialize ("Marshal failed!")       │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  500   │ Handler raised something unexpected                      │
    │  503   │ Thread pool queue is full                                │
    │  505   │ Request line is not HTTP/1.0 or HTTP/1.1                 │
    └────────┴───────────────────────────────────────────────────────────┘

417 signals a serialization failure here, although RFC 7231 reserves it
for the Expect header. Existing RESTCONF clients look for it.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    An IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.EXPECTATION_FAILED.phrase
        'Expectation Failed'
    """

    # 2xx SUCCESS
    OK = 200
    NO_CONTENT = 204

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413
    UNSUPPORTED_MEDIA_TYPE = 415
    EXPECTATION_FAILED = 417

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 417 Expectation Failed
                     ─── ──────────────────
                      │          │
                      │          └── phrase
                      └───────────── status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx; the access log uses this to pick a level."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NO_CONTENT: "No Content",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not Acceptable",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    HTTPStatus.EXPECTATION_FAILED: "Expectation Failed",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
