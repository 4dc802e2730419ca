"""
=============================================================================
RESOURCE ENCODERS
=============================================================================

Explicit XML and JSON mappings for each RESTCONF representation.

=============================================================================
WIRE FORMATS
=============================================================================

RestconfRoot, application/yang-data+json:

    {"ietf-restconf:restconf": {"data": {}, "operations": {},
                                "yang-library-version": "2016-06-21"}}

RestconfRoot, application/yang-data+xml:

    <restconf xmlns="urn:ietf:params:xml:ns:yang:ietf-restconf">
      <data /><operations />
      <yang-library-version>2016-06-21</yang-library-version>
    </restconf>

YangLibraryVersion:

    {"yang-library-version": "2016-06-21"}
    <yang-library-version xmlns="urn:...:ietf-restconf">2016-06-21</yang-library-version>

HostMeta (XML only, hand-written XRD; see host_meta_to_xrd):

    <XRD xmlns='http://docs.oasis-open.org/ns/xri/xrd-1.0'>
        <Link rel='restconf' href='/restconf'/>
    </XRD>

The XML documents above are shown wrapped for reading; on the wire they
are a single line with no XML declaration.

=============================================================================
FAILURES
=============================================================================

json.dumps() and ElementTree raise TypeError/ValueError for values they
cannot represent. Both are wrapped in EncodingError, which the handler
turns into 417 "Marshal failed! <reason>".

=============================================================================
"""

from typing import Any, Callable, Dict, Tuple, Type
from xml.sax.saxutils import escape
import json
import xml.etree.ElementTree as ET

from ..errors import EncodingError
from ..http.media_types import (
    RESTCONF_JSON_ROOT,
    XRD_NAMESPACE,
    XRD_XML,
    is_json,
    is_xml,
)
from .models import HostMeta, RestconfRoot, YangLibraryVersion


# ─────────────────────────────────────────────────────────────────────────────
# XML helpers
# ─────────────────────────────────────────────────────────────────────────────

def _element(tag: str, namespace: str = "", text: Any = None) -> ET.Element:
    """
    Build an element with a default namespace declaration.

    The xmlns attribute is set by hand rather than through a "{ns}tag"
    name so ElementTree writes a default namespace instead of "ns0:".
    """
    elem = ET.Element(tag)
    if namespace:
        elem.set("xmlns", namespace)
    if text is not None:
        elem.text = text
    return elem


def _xml_bytes(elem: ET.Element) -> bytes:
    # encoding="unicode" suppresses the <?xml ...?> declaration
    return ET.tostring(elem, encoding="unicode").encode("utf-8")


# ─────────────────────────────────────────────────────────────────────────────
# Per-resource mappings
# ─────────────────────────────────────────────────────────────────────────────

def root_to_xml(root: RestconfRoot) -> bytes:
    elem = _element("restconf", root.namespace)
    ET.SubElement(elem, "data")
    ET.SubElement(elem, "operations")
    version = ET.SubElement(elem, "yang-library-version")
    version.text = root.yang_library_version
    return _xml_bytes(elem)


def root_to_json(root: RestconfRoot) -> bytes:
    document = {
        RESTCONF_JSON_ROOT: {
            "data": root.data,
            "operations": root.operations,
            "yang-library-version": root.yang_library_version,
        }
    }
    return json.dumps(document).encode("utf-8")


def version_to_xml(version: YangLibraryVersion) -> bytes:
    return _xml_bytes(
        _element("yang-library-version", version.namespace, version.version)
    )


def version_to_json(version: YangLibraryVersion) -> bytes:
    return json.dumps({"yang-library-version": version.version}).encode("utf-8")


def host_meta_to_xrd(host_meta: HostMeta) -> bytes:
    """
    Render the XRD discovery document.

    Written out as text, not built with ElementTree, to keep the
    single-quoted attribute layout that deployed clients match on.
    """
    href = escape(host_meta.root, {"'": "&apos;"})
    return (
        f"<XRD xmlns='{XRD_NAMESPACE}'>\n"
        f"    <Link rel='restconf' href='{href}'/>\n"
        f"</XRD>"
    ).encode("utf-8")


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch by (representation type, encoding)
# ─────────────────────────────────────────────────────────────────────────────

Encoder = Callable[[Any], bytes]

_ENCODERS: Dict[Tuple[Type, str], Encoder] = {
    (RestconfRoot, "xml"): root_to_xml,
    (RestconfRoot, "json"): root_to_json,
    (YangLibraryVersion, "xml"): version_to_xml,
    (YangLibraryVersion, "json"): version_to_json,
    (HostMeta, "xrd"): host_meta_to_xrd,
}


def _encoding_of(media_type: str) -> str:
    if media_type == XRD_XML:
        return "xrd"
    if is_xml(media_type):
        return "xml"
    if is_json(media_type):
        return "json"
    return ""


def encode(representation: Any, media_type: str) -> bytes:
    """
    Serialize a representation for a negotiated media type.

    Raises:
        EncodingError: No mapping exists for this (type, media type) pair,
            or the mapping itself failed.
    """
    encoder = _ENCODERS.get((type(representation), _encoding_of(media_type)))
    if encoder is None:
        raise EncodingError(
            media_type,
            ValueError(
                f"no {media_type} encoding for {type(representation).__name__}"
            ),
        )

    try:
        return encoder(representation)
    except (TypeError, ValueError) as e:
        raise EncodingError(media_type, e) from e
