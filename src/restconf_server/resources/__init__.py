"""
RESTCONF resources: representations, their XML/JSON encodings, and the
handlers that negotiate between them.
"""

from .models import HostMeta, RestconfRoot, YangLibraryVersion, YANG_LIBRARY_VERSION
from .encoders import encode, host_meta_to_xrd
from .handlers import ResourceHandlers, HOST_META_PATH

__all__ = [
    "HostMeta",
    "RestconfRoot",
    "YangLibraryVersion",
    "YANG_LIBRARY_VERSION",
    "encode",
    "host_meta_to_xrd",
    "ResourceHandlers",
    "HOST_META_PATH",
]
