"""
=============================================================================
RESTCONF - Minimal RESTCONF (RFC 8040) Server
=============================================================================

Serves the RESTCONF discovery and root resources over a from-scratch
HTTP/1.1 server, negotiating XML or JSON from the Accept header.

=============================================================================
RESOURCES
=============================================================================

    ┌──────────────────────────────────┬────────────────────────────────────┐
    │ Path                             │ Answer                             │
    ├──────────────────────────────────┼────────────────────────────────────┤
    │ /.well-known/host-meta           │ XRD pointing at the API root       │
    │ /restconf                        │ root resource, XML or JSON         │
    │ /restconf/yang-library-version   │ "2016-06-21", XML or JSON          │
    │ /restconf/data                   │ empty 200 (no datastore)           │
    │ /restconf/operations             │ empty 200 (no RPCs)                │
    └──────────────────────────────────┴────────────────────────────────────┘

Every dispatched response carries "Server: RESTCONF" and a Date header.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    restconf_server/
    ├── __main__.py          CLI (python -m restconf_server)
    ├── server.py            RestconfServer, logging setup
    ├── config.py            ServerConfig
    ├── errors.py            exception hierarchy
    ├── core/                sockets, connections, worker pool
    ├── http/                parser, responses, dispatcher, media types
    ├── middleware/          access log
    ├── resources/           representations, encoders, handlers
    └── yang/                YANG module loading (pyang)

=============================================================================
QUICK START
=============================================================================

    from restconf_server import RestconfServer, ServerConfig

    server = RestconfServer(ServerConfig.from_address("127.0.0.1:8408"))
    server.run()

    $ curl -H 'Accept: application/yang-data+json' localhost:8408/restconf
    {"ietf-restconf:restconf": {"data": {}, "operations": {}, ...}}

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .errors import ConfigurationError, DuplicateRouteError, EncodingError, RestconfError
from .server import RestconfServer, build_dispatcher, configure_logging

__all__ = [
    "__version__",
    "ServerConfig",
    "RestconfServer",
    "build_dispatcher",
    "configure_logging",
    "RestconfError",
    "ConfigurationError",
    "DuplicateRouteError",
    "EncodingError",
]
