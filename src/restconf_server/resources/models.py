"""
RESTCONF resource representations.

Plain immutable values; how they look on the wire lives in encoders.py.
The XML namespace is carried here because the XML encoding needs it,
but it never appears in the JSON encoding (RFC 7951 uses the module
name prefix instead).
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..http.media_types import RESTCONF_NAMESPACE


YANG_LIBRARY_VERSION = "2016-06-21"
DEFAULT_ROOT = "/restconf"


@dataclass(frozen=True)
class HostMeta:
    """
    XRD discovery document (RFC 6415) served at /.well-known/host-meta.

    Tells clients where the RESTCONF API root lives (RFC 8040 section 3.1).
    """

    root: str = DEFAULT_ROOT


@dataclass(frozen=True)
class RestconfRoot:
    """
    The {+restconf} API resource (RFC 8040 section 3.3).

    data and operations are always empty: there is no datastore behind
    this server.
    """

    yang_library_version: str = YANG_LIBRARY_VERSION
    namespace: str = RESTCONF_NAMESPACE
    data: Dict[str, Any] = field(default_factory=dict)
    operations: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class YangLibraryVersion:
    """{+restconf}/yang-library-version (RFC 8040 section 3.3.3)."""

    version: str = YANG_LIBRARY_VERSION
    namespace: str = RESTCONF_NAMESPACE
