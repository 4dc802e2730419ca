"""
Unit tests for the RESTCONF resource handlers.
"""

import json

import pytest

from restconf_server.errors import DuplicateRouteError
from restconf_server.http.dispatcher import Dispatcher
from restconf_server.http.request import parse_request
from restconf_server.http.status_codes import HTTPStatus
from restconf_server.resources import ResourceHandlers
from restconf_server.resources.models import YangLibraryVersion


JSON = "application/yang-data+json"
XML = "application/yang-data+xml"
XRD = "application/xrd+xml"


class TestHostMeta:
    """Tests for /.well-known/host-meta."""

    def test_xrd(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/.well-known/host-meta", XRD))

        assert response.status == HTTPStatus.OK
        assert response.content_type == XRD
        assert b"<Link rel='restconf' href='/restconf'/>" in response.body

    def test_method_checked_before_accept(self, dispatcher, request_factory):
        response = dispatcher.dispatch(
            request_factory("/.well-known/host-meta", "text/html", method="POST")
        )

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.body == b"method is not GET!\n"

    def test_wrong_accept(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/.well-known/host-meta", JSON))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.body == b"Accept is incorrect!\n"

    def test_custom_root_is_advertised(self, clock, request_factory):
        d = Dispatcher(clock=clock)
        ResourceHandlers(root="/api/restconf").register_all(d)

        response = d.dispatch(request_factory("/.well-known/host-meta", XRD))

        assert b"href='/api/restconf'" in response.body


class TestRoot:
    """Tests for the {+restconf} root resource."""

    def test_json(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/restconf", JSON))

        assert response.status == HTTPStatus.OK
        assert response.content_type == JSON
        assert json.loads(response.body)["ietf-restconf:restconf"]["yang-library-version"] == "2016-06-21"

    def test_xml(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/restconf", XML))

        assert response.status == HTTPStatus.OK
        assert response.content_type == XML
        assert b'xmlns="urn:ietf:params:xml:ns:yang:ietf-restconf"' in response.body

    def test_repeated_accept_header(self, dispatcher):
        request = parse_request(
            b"GET /restconf HTTP/1.1\r\n"
            b"Accept: application/yang-data+json\r\n"
            b"Accept: application/yang-data+json\r\n"
            b"\r\n"
        )

        response = dispatcher.dispatch(request)

        assert response.status == HTTPStatus.OK
        assert response.content_type == JSON

    @pytest.mark.parametrize("accept", [
        "",
        "*/*",
        "application/json",
        "application/yang-data+json; charset=utf-8",
        XRD,
    ])
    def test_rejected_accept(self, dispatcher, request_factory, accept):
        response = dispatcher.dispatch(request_factory("/restconf", accept))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.body.strip() == b"Accept is incorrect!"

    def test_any_method_is_served(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/restconf", JSON, method="DELETE"))

        assert response.status == HTTPStatus.OK

    def test_unknown_subpath_falls_back_to_root(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/restconf/streams", JSON))

        assert response.status == HTTPStatus.OK
        assert b"ietf-restconf:restconf" in response.body


class TestYangLibraryVersion:
    """Tests for {+restconf}/yang-library-version."""

    def test_json(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/restconf/yang-library-version", JSON))

        assert response.status == HTTPStatus.OK
        assert response.body == b'{"yang-library-version": "2016-06-21"}'

    def test_xml(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/restconf/yang-library-version", XML))

        assert response.status == HTTPStatus.OK
        assert response.body.endswith(b">2016-06-21</yang-library-version>")

    def test_configured_version(self, request_factory):
        handlers = ResourceHandlers(yang_library_version="2019-01-04")

        response = handlers.yang_library_version(
            request_factory("/restconf/yang-library-version", JSON)
        )

        assert json.loads(response.body) == {"yang-library-version": "2019-01-04"}

    def test_marshal_failure_is_417(self, request_factory, monkeypatch):
        handlers = ResourceHandlers()
        monkeypatch.setattr(
            handlers, "version_resource", lambda: YangLibraryVersion(version=object())
        )

        response = handlers.yang_library_version(
            request_factory("/restconf/yang-library-version", JSON)
        )

        assert response.status == HTTPStatus.EXPECTATION_FAILED
        assert response.body.startswith(b"Marshal failed! ")


class TestPlaceholders:
    """Tests for the data and operations stubs."""

    @pytest.mark.parametrize("path", [
        "/restconf/data",
        "/restconf/data/base:system",
        "/restconf/operations",
        "/restconf/operations/base:reboot",
    ])
    def test_empty_ok(self, dispatcher, request_factory, path):
        response = dispatcher.dispatch(request_factory(path, "text/html", method="PUT"))

        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert response.headers["Server"] == "RESTCONF"
        assert response.headers["Date"] == "Sat, 17 Oct 2026 12:00:00 GMT"

    def test_handlers_return_none(self, request_factory):
        handlers = ResourceHandlers()

        assert handlers.data(request_factory("/restconf/data")) is None
        assert handlers.operations(request_factory("/restconf/operations")) is None


class TestRegistration:
    """Tests for ResourceHandlers.register_all()."""

    def test_registers_five_routes(self):
        d = Dispatcher()
        ResourceHandlers().register_all(d)

        assert sorted(route.path for route in d.routes()) == [
            "/.well-known/host-meta",
            "/restconf",
            "/restconf/data",
            "/restconf/operations",
            "/restconf/yang-library-version",
        ]

    def test_second_registration_fails(self):
        d = Dispatcher()
        ResourceHandlers().register_all(d)

        with pytest.raises(DuplicateRouteError) as exc_info:
            ResourceHandlers().register_all(d)

        assert exc_info.value.path == "/.well-known/host-meta"

    def test_unmatched_path_is_404(self, dispatcher, request_factory):
        response = dispatcher.dispatch(request_factory("/.well-known/other", XRD))

        assert response.status == HTTPStatus.NOT_FOUND
