"""
Unit tests for the XML/JSON/XRD resource encoders.
"""

import json
import xml.etree.ElementTree as ET

import pytest

from restconf_server.errors import EncodingError
from restconf_server.resources.encoders import encode, host_meta_to_xrd
from restconf_server.resources.models import HostMeta, RestconfRoot, YangLibraryVersion


NS = "{urn:ietf:params:xml:ns:yang:ietf-restconf}"


class TestRootEncoding:
    """Tests for the {+restconf} root document."""

    def test_json(self):
        body = encode(RestconfRoot(), "application/yang-data+json")

        assert json.loads(body) == {
            "ietf-restconf:restconf": {
                "data": {},
                "operations": {},
                "yang-library-version": "2016-06-21",
            }
        }

    def test_json_has_no_namespace(self):
        body = encode(RestconfRoot(), "application/yang-data+json")

        assert b"urn:ietf" not in body

    def test_xml(self):
        body = encode(RestconfRoot(), "application/yang-data+xml")
        root = ET.fromstring(body)

        assert root.tag == f"{NS}restconf"
        assert [child.tag for child in root] == [
            f"{NS}data",
            f"{NS}operations",
            f"{NS}yang-library-version",
        ]
        assert root.find(f"{NS}yang-library-version").text == "2016-06-21"

    def test_xml_uses_default_namespace(self):
        body = encode(RestconfRoot(), "application/yang-data+xml")

        assert body.startswith(b'<restconf xmlns="urn:ietf:params:xml:ns:yang:ietf-restconf">')
        assert b"ns0:" not in body
        assert not body.startswith(b"<?xml")


class TestVersionEncoding:
    """Tests for the yang-library-version leaf."""

    def test_json(self):
        body = encode(YangLibraryVersion(), "application/yang-data+json")

        assert body == b'{"yang-library-version": "2016-06-21"}'

    def test_xml(self):
        body = encode(YangLibraryVersion(), "application/yang-data+xml")

        assert body == (
            b'<yang-library-version xmlns="urn:ietf:params:xml:ns:yang:ietf-restconf">'
            b"2016-06-21</yang-library-version>"
        )

    def test_custom_version(self):
        body = encode(YangLibraryVersion(version="2019-01-04"), "application/yang-data+json")

        assert json.loads(body)["yang-library-version"] == "2019-01-04"


class TestHostMetaEncoding:
    """Tests for the XRD discovery document."""

    def test_xrd_layout(self):
        body = encode(HostMeta(), "application/xrd+xml")

        assert body == (
            b"<XRD xmlns='http://docs.oasis-open.org/ns/xri/xrd-1.0'>\n"
            b"    <Link rel='restconf' href='/restconf'/>\n"
            b"</XRD>"
        )

    def test_xrd_is_well_formed(self):
        root = ET.fromstring(host_meta_to_xrd(HostMeta(root="/top/restconf")))
        link = root.find("{http://docs.oasis-open.org/ns/xri/xrd-1.0}Link")

        assert link.get("rel") == "restconf"
        assert link.get("href") == "/top/restconf"

    def test_href_is_escaped(self):
        body = host_meta_to_xrd(HostMeta(root="/a'b&c"))

        assert b"href='/a&apos;b&amp;c'" in body


class TestEncodingFailures:
    """Tests for EncodingError."""

    def test_unmapped_media_type(self):
        with pytest.raises(EncodingError) as exc_info:
            encode(HostMeta(), "application/yang-data+json")

        assert exc_info.value.media_type == "application/yang-data+json"
        assert "HostMeta" in str(exc_info.value)

    def test_unknown_representation(self):
        with pytest.raises(EncodingError):
            encode({"not": "a resource"}, "application/yang-data+json")

    def test_json_failure_is_wrapped(self):
        with pytest.raises(EncodingError) as exc_info:
            encode(YangLibraryVersion(version=object()), "application/yang-data+json")

        assert isinstance(exc_info.value.cause, TypeError)

    def test_xml_failure_is_wrapped(self):
        with pytest.raises(EncodingError) as exc_info:
            encode(YangLibraryVersion(version=object()), "application/yang-data+xml")

        assert isinstance(exc_info.value.cause, TypeError)
