"""
Unit tests for HTTP response building.
"""

from datetime import datetime, timedelta, timezone

from restconf_server.http.response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    error_response,
    bad_request,
    not_found,
    expectation_failed,
    internal_error,
    format_http_date,
)
from restconf_server.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_default_is_empty_ok(self):
        """A bare response is an empty 200."""
        response = HTTPResponse()

        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert response.headers == {}

    def test_status_line(self):
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert (
            HTTPResponse(status=HTTPStatus.EXPECTATION_FAILED).status_line
            == "HTTP/1.1 417 Expectation Failed"
        )

    def test_to_bytes_includes_headers(self):
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"Content-Type": "application/yang-data+xml"},
            body=b"<x/>",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type: application/yang-data+xml\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert result.endswith(b"\r\n\r\n<x/>")

    def test_to_bytes_fills_server_and_date(self):
        """Server and Date fall back when a response never saw the dispatcher."""
        result = HTTPResponse().to_bytes(server_name="RESTCONF")

        assert b"Server: RESTCONF\r\n" in result
        assert b"Date: " in result
        assert b"Content-Length: 0\r\n" in result

    def test_to_bytes_without_body(self):
        """HEAD responses keep Content-Length but send no body."""
        response = HTTPResponse(body=b'{"yang-library-version": "2016-06-21"}')

        result = response.to_bytes(include_body=False)

        assert result.endswith(b"\r\n\r\n")
        assert f"Content-Length: {len(response.body)}\r\n".encode() in result
        assert b"yang-library-version" not in result

    def test_to_bytes_keeps_existing_server(self):
        response = HTTPResponse(headers={"Server": "custom"})

        result = response.to_bytes(server_name="RESTCONF")

        assert b"Server: custom\r\n" in result
        assert b"Server: RESTCONF" not in result

    def test_set_header_chaining(self):
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers == {"X-One": "1", "X-Two": "2"}

    def test_set_body_encodes_strings(self):
        response = HTTPResponse().set_body("héllo")

        assert response.body == "héllo".encode("utf-8")


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_method_chaining(self):
        response = (
            ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("application/yang-data+json")
            .body(b"{}")
            .header("X-Extra", "1")
            .build()
        )

        assert response.status == HTTPStatus.OK
        assert response.content_type == "application/yang-data+json"
        assert response.body == b"{}"
        assert response.headers["X-Extra"] == "1"

    def test_text_body(self):
        response = ResponseBuilder().text("hello").build()

        assert response.content_type == "text/plain; charset=utf-8"
        assert response.body == b"hello"

    def test_no_sniff(self):
        response = ResponseBuilder().no_sniff().build()

        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_keep_alive(self):
        response = ResponseBuilder().keep_alive(timeout=5).build()

        assert response.headers["Connection"] == "keep-alive"
        assert "timeout=5" in response.headers["Keep-Alive"]

    def test_close_connection(self):
        response = ResponseBuilder().close_connection().build()

        assert response.headers["Connection"] == "close"

    def test_build_copies_headers(self):
        """Later builder calls do not leak into an already built response."""
        builder = ResponseBuilder().header("X-A", "1")
        first = builder.build()
        builder.header("X-B", "2")

        assert "X-B" not in first.headers


class TestConvenienceFunctions:
    """Tests for the response helpers."""

    def test_ok_sends_body_verbatim(self):
        response = ok(b"<restconf/>", content_type="application/yang-data+xml")

        assert response.status == HTTPStatus.OK
        assert response.body == b"<restconf/>"
        assert response.content_type == "application/yang-data+xml"

    def test_ok_without_content_type(self):
        response = ok()

        assert response.body == b""
        assert "Content-Type" not in response.headers

    def test_error_response_is_plain_text(self):
        response = error_response(HTTPStatus.BAD_REQUEST, "Accept is incorrect!")

        assert response.status == 400
        assert response.body == b"Accept is incorrect!\n"
        assert response.content_type == "text/plain; charset=utf-8"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_not_found(self):
        response = not_found()

        assert response.status == 404
        assert response.body == b"404 page not found\n"

    def test_bad_request(self):
        response = bad_request("method is not GET!")

        assert response.status == 400
        assert response.body.strip() == b"method is not GET!"

    def test_expectation_failed(self):
        response = expectation_failed("Marshal failed! boom")

        assert response.status == 417
        assert response.body.strip() == b"Marshal failed! boom"

    def test_internal_error(self):
        response = internal_error()

        assert response.status == 500
        assert response.content_type == "text/plain; charset=utf-8"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.EXPECTATION_FAILED.phrase == "Expectation Failed"

    def test_status_categories(self):
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.BAD_REQUEST.is_client_error
        assert HTTPStatus.SERVICE_UNAVAILABLE.is_server_error

        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_error
        assert not HTTPStatus.OK.is_error

    def test_compares_with_int(self):
        assert HTTPStatus.EXPECTATION_FAILED == 417


class TestFormatHTTPDate:
    """Tests for HTTP date formatting."""

    def test_format(self):
        dt = datetime(2026, 1, 15, 12, 30, 45, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Thu, 15 Jan 2026 12:30:45 GMT"

    def test_converts_to_gmt(self):
        cest = timezone(timedelta(hours=2))
        dt = datetime(2026, 10, 17, 14, 0, 0, tzinfo=cest)

        assert format_http_date(dt) == "Sat, 17 Oct 2026 12:00:00 GMT"
