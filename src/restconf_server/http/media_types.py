"""
=============================================================================
RESTCONF MEDIA TYPES
=============================================================================

The media types a RESTCONF client may put in its Accept header, and the
XML namespaces that travel with them.

=============================================================================
WHICH RESOURCE SPEAKS WHICH TYPE
=============================================================================

    ┌──────────────────────────────────┬────────────┬──────────┬─────────┐
    │  Media type                      │ host-meta  │ restconf │ version │
    ├──────────────────────────────────┼────────────┼──────────┼─────────┤
    │  application/xrd+xml             │     ✓      │          │         │
    │  application/yang-data+xml       │            │    ✓     │    ✓    │
    │  application/yang-data+json      │            │    ✓     │    ✓    │
    └──────────────────────────────────┴────────────┴──────────┴─────────┘

Negotiation is an EXACT string comparison against the Accept header.
There is no q-value parsing, no wildcard (*/*) handling and no default
format: "application/yang-data+json; charset=utf-8" is rejected just like
"text/html". A resource that cannot produce the requested type answers
400 "Accept is incorrect!".

=============================================================================
"""

from typing import Iterable, Optional


XRD_XML = "application/xrd+xml"
YANG_DATA_XML = "application/yang-data+xml"
YANG_DATA_JSON = "application/yang-data+json"

YANG_DATA_TYPES = frozenset({YANG_DATA_XML, YANG_DATA_JSON})
HOST_META_TYPES = frozenset({XRD_XML})

# Namespaces (RFC 8040 section 8, RFC 6415 section 3)
RESTCONF_NAMESPACE = "urn:ietf:params:xml:ns:yang:ietf-restconf"
XRD_NAMESPACE = "http://docs.oasis-open.org/ns/xri/xrd-1.0"

# Module-qualified top-level member name for JSON encodings (RFC 7951)
RESTCONF_JSON_ROOT = "ietf-restconf:restconf"


def negotiate(accept: str, supported: Iterable[str]) -> Optional[str]:
    """
    Pick the response media type for an Accept header value.

    Returns the Accept value itself when a resource supports it verbatim,
    otherwise None.
    """
    return accept if accept in supported else None


def is_xml(media_type: str) -> bool:
    return media_type.endswith("+xml")


def is_json(media_type: str) -> bool:
    return media_type.endswith("+json")
