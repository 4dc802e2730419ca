"""
=============================================================================
RESTCONF RESOURCE HANDLERS
=============================================================================

One handler per RESTCONF resource. Each media-negotiated handler runs the
same short protocol:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Accept header                                                      │
    │        │                                                             │
    │        ├── not a supported type? ──► 400 "Accept is incorrect!"     │
    │        │                                                             │
    │        ▼                                                             │
    │   build representation (models.py)                                  │
    │        │                                                             │
    │        ▼                                                             │
    │   encode() (encoders.py)                                             │
    │        │                                                             │
    │        ├── EncodingError? ──► 417 "Marshal failed! <reason>"         │
    │        │                                                             │
    │        ▼                                                             │
    │   200, Content-Type = the Accept value, body = encoded bytes         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

host-meta also rejects anything but GET, before it looks at Accept.
The data and operations handlers are placeholders: they return None and
the dispatcher answers with an empty 200.

=============================================================================
ROUTES
=============================================================================

    /.well-known/host-meta          → host_meta
    {root}                          → root
    {root}/data                     → data
    {root}/operations               → operations
    {root}/yang-library-version     → yang_library_version

=============================================================================
"""

from typing import Any, Optional
import logging

from ..errors import EncodingError
from ..http.dispatcher import Dispatcher
from ..http.media_types import HOST_META_TYPES, YANG_DATA_TYPES, negotiate
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, bad_request, expectation_failed, ok
from .encoders import encode
from .models import (
    DEFAULT_ROOT,
    YANG_LIBRARY_VERSION,
    HostMeta,
    RestconfRoot,
    YangLibraryVersion,
)


logger = logging.getLogger(__name__)

HOST_META_PATH = "/.well-known/host-meta"

METHOD_NOT_GET = "method is not GET!"
ACCEPT_INCORRECT = "Accept is incorrect!"
MARSHAL_FAILED = "Marshal failed!"


class ResourceHandlers:
    """
    The RESTCONF resources for one API root.

    Args:
        root: Path of the RESTCONF API root, advertised by host-meta.
        yang_library_version: Revision date reported by the root and
            yang-library-version resources.
    """

    def __init__(
        self,
        root: str = DEFAULT_ROOT,
        yang_library_version: str = YANG_LIBRARY_VERSION
    ):
        self.api_root = root
        self.library_version = yang_library_version

    # ─────────────────────────────────────────────────────────────────────
    # Representations
    # ─────────────────────────────────────────────────────────────────────

    def host_meta_resource(self) -> HostMeta:
        return HostMeta(root=self.api_root)

    def root_resource(self) -> RestconfRoot:
        return RestconfRoot(yang_library_version=self.library_version)

    def version_resource(self) -> YangLibraryVersion:
        return YangLibraryVersion(version=self.library_version)

    # ─────────────────────────────────────────────────────────────────────
    # Handlers
    # ─────────────────────────────────────────────────────────────────────

    def host_meta(self, request: HTTPRequest) -> HTTPResponse:
        if request.method != "GET":
            logger.debug(f"host-meta: rejected method {request.method}")
            return bad_request(METHOD_NOT_GET)

        return self._negotiate(request, HOST_META_TYPES, self.host_meta_resource())

    def root(self, request: HTTPRequest) -> HTTPResponse:
        return self._negotiate(request, YANG_DATA_TYPES, self.root_resource())

    def yang_library_version(self, request: HTTPRequest) -> HTTPResponse:
        return self._negotiate(request, YANG_DATA_TYPES, self.version_resource())

    def data(self, request: HTTPRequest) -> Optional[HTTPResponse]:
        # No datastore: empty 200
        return None

    def operations(self, request: HTTPRequest) -> Optional[HTTPResponse]:
        # No RPCs: empty 200
        return None

    def _negotiate(
        self,
        request: HTTPRequest,
        supported: frozenset,
        representation: Any
    ) -> HTTPResponse:
        media_type = negotiate(request.accept, supported)
        if media_type is None:
            logger.debug(
                f"{request.path}: unsupported Accept {request.accept!r}"
            )
            return bad_request(ACCEPT_INCORRECT)

        try:
            body = encode(representation, media_type)
        except EncodingError as e:
            logger.error(f"{request.path}: encoding {media_type} failed: {e}")
            return expectation_failed(f"{MARSHAL_FAILED} {e}")

        return ok(body, content_type=media_type)

    # ─────────────────────────────────────────────────────────────────────
    # Registration
    # ─────────────────────────────────────────────────────────────────────

    def register_all(self, dispatcher: Dispatcher) -> None:
        """
        Register every resource on dispatcher.

        Raises:
            DuplicateRouteError: One of the paths is already taken.
        """
        dispatcher.register(HOST_META_PATH, self.host_meta)
        dispatcher.register(self.api_root, self.root)
        dispatcher.register(f"{self.api_root}/data", self.data)
        dispatcher.register(f"{self.api_root}/operations", self.operations)
        dispatcher.register(
            f"{self.api_root}/yang-library-version", self.yang_library_version
        )
