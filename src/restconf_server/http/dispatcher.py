"""
=============================================================================
RESOURCE DISPATCHER
=============================================================================

Maps request paths to RESTCONF resource handlers and stamps every
dispatched response with the headers the protocol requires.

=============================================================================
RESOLUTION ORDER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /restconf//data/../yang-library-version/                      │
    │        │                                                             │
    │        ▼                                                             │
    │   clean_path() ──► /restconf/yang-library-version/                  │
    │        │                                                             │
    │        ▼                                                             │
    │   1. exact match?           no                                       │
    │        │                                                             │
    │        ▼                                                             │
    │   2. prefix match, longest registered path first:                    │
    │        /restconf/yang-library-version   ← MATCH                     │
    │        /.well-known/host-meta                                        │
    │        /restconf/operations                                          │
    │        /restconf/data                                                │
    │        /restconf                                                     │
    │        │                                                             │
    │        ▼                                                             │
    │   3. nothing matched?       404 "404 page not found"                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Prefix matching is a plain string comparison, not a segment comparison:
"/restconfig" falls back to "/restconf". Trying longer paths first makes
the choice deterministic when several registered paths are prefixes of
the request path.

=============================================================================
RESPONSE DECORATION
=============================================================================

After the handler returns, the dispatcher sets

    Server: RESTCONF
    Date:   <RFC 1123 date, GMT>

unconditionally, overwriting anything the handler put there. A handler
that returns None (the data and operations placeholders) produces an
empty 200.

=============================================================================
LIFECYCLE
=============================================================================

The route table is filled while the server is constructed and then
frozen. Worker threads only read it afterwards, so no lock is needed.

    register() ... register() ──► freeze() ──► dispatch() from N threads
         │
         └── same path twice? DuplicateRouteError (server never starts)

=============================================================================
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
import logging

from ..errors import ConfigurationError, DuplicateRouteError
from .request import HTTPRequest
from .response import HTTPResponse, format_http_date, not_found


logger = logging.getLogger(__name__)

# A handler may return None to mean "empty 200".
Handler = Callable[[HTTPRequest], Optional[HTTPResponse]]


@dataclass(frozen=True)
class Route:
    """
    A registered (path, handler) pair.

    Identity is the path string: two routes with the same path cannot
    coexist in one Dispatcher.
    """

    path: str
    handler: Handler

    def matches_prefix(self, path: str) -> bool:
        return path.startswith(self.path)


def clean_path(path: str) -> str:
    """
    Return the canonical form of a request path.

        ""                          → "/"
        "restconf"                  → "/restconf"
        "/restconf//data"           → "/restconf/data"
        "/restconf/./data"          → "/restconf/data"
        "/restconf/data/.."         → "/restconf"
        "/../../restconf"           → "/restconf"     (never above root)
        "/restconf/"                → "/restconf/"    (trailing slash kept)
        "/restconf/data/../"        → "/restconf/"

    The path is treated as rooted, so ".." at the top is dropped.
    """
    if not path:
        return "/"

    segments: List[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)

    cleaned = "/" + "/".join(segments)

    if path.endswith("/") and cleaned != "/":
        cleaned += "/"

    return cleaned


class Dispatcher:
    """
    The RESTCONF route table.

    Usage:
        dispatcher = Dispatcher()
        dispatcher.register("/restconf", handlers.root)
        dispatcher.register("/restconf/data", handlers.data)
        dispatcher.freeze()

        response = dispatcher.dispatch(request)

    Args:
        server_name: Value of the Server header on every dispatched response.
        clock: Returns the current UTC time; tests pass a fixed clock.
    """

    def __init__(
        self,
        server_name: str = "RESTCONF",
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.server_name = server_name
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._routes: Dict[str, Route] = {}
        # Longest path first; rebuilt on every register()
        self._prefix_order: List[Route] = []
        self._frozen = False

    # ─────────────────────────────────────────────────────────────────────
    # Registration
    # ─────────────────────────────────────────────────────────────────────

    def register(self, path: str, handler: Handler) -> Route:
        """
        Add a route.

        Raises:
            DuplicateRouteError: A handler is already registered for path.
            ConfigurationError: The table has been frozen.
        """
        if self._frozen:
            raise ConfigurationError(
                f"cannot register {path!r}: route table is frozen"
            )

        if path in self._routes:
            raise DuplicateRouteError(path)

        route = Route(path=path, handler=handler)
        self._routes[path] = route
        self._prefix_order = sorted(
            self._routes.values(),
            key=lambda r: (-len(r.path), r.path),
        )

        logger.debug(f"Registered route {path}")
        return route

    def freeze(self) -> None:
        """Make the table read-only; dispatch() may then run concurrently."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def routes(self) -> List[Route]:
        """Registered routes in registration order."""
        return list(self._routes.values())

    # ─────────────────────────────────────────────────────────────────────
    # Resolution
    # ─────────────────────────────────────────────────────────────────────

    def lookup(self, path: str) -> Optional[Route]:
        """
        Find the route for an already-cleaned path.

        Exact match first, then the longest registered path that is a
        string prefix of path.
        """
        route = self._routes.get(path)
        if route is not None:
            return route

        for candidate in self._prefix_order:
            if candidate.matches_prefix(path):
                return candidate

        return None

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Resolve the request path and run the handler.

        Handler exceptions propagate to the caller; the connection loop
        turns them into a 500.
        """
        path = clean_path(request.path)
        route = self.lookup(path)

        if route is None:
            logger.debug(f"No route for {path}")
            return not_found()

        response = route.handler(request)
        if response is None:
            response = HTTPResponse()

        return self._decorate(response)

    def _decorate(self, response: HTTPResponse) -> HTTPResponse:
        response.headers["Server"] = self.server_name
        response.headers["Date"] = format_http_date(self._clock())
        return response

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.dispatch(request)

    def __len__(self) -> int:
        return len(self._routes)
