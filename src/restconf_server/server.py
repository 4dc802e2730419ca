"""
=============================================================================
RESTCONF SERVER
=============================================================================

Wires the transport, the dispatcher and the RESTCONF resources together.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   ThreadPool.submit(_process_connection)      full? → 503            │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.read_request()                   slow? → 408            │
    │        │                                                             │
    │        ▼                                                             │
    │   RequestParser.parse()                       bad?  → 400/405/413/505│
    │        │                                                             │
    │        ▼                                                             │
    │   LoggingMiddleware                                                  │
    │        │                                                             │
    │        ▼                                                             │
    │   Dispatcher.dispatch() ──► ResourceHandlers  raised? → 500          │
    │        │                                                             │
    │        ▼                                                             │
    │   HTTPResponse.to_bytes() ──► Connection.send_response()             │
    │        │                                                             │
    │        └── keep-alive? read the next request on the same socket      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONSTRUCTION
=============================================================================

Everything that can be wrong with the setup is caught in __init__,
before a socket is opened:

    config.validate()             → ConfigurationError
    handlers.register_all()       → DuplicateRouteError
    dispatcher.freeze()

After that the route table is read-only and shared by all workers.

=============================================================================
"""

from typing import Callable, Optional, Tuple
import logging

from .config import ServerConfig
from .core import Connection, SocketServer, ThreadPool
from .http import (
    Dispatcher,
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    RequestParser,
    error_response,
    internal_error,
)
from .middleware import LoggingMiddleware, MiddlewarePipeline
from .resources import ResourceHandlers


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: ServerConfig) -> None:
    """Install the process-wide log format and level from config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger("restconf_server").setLevel(level)


def build_dispatcher(config: ServerConfig) -> Dispatcher:
    """
    Create the frozen route table for config.

    Raises:
        DuplicateRouteError: Two resources resolve to the same path.
    """
    dispatcher = Dispatcher(server_name=config.server_name)
    handlers = ResourceHandlers(
        root=config.restconf_root,
        yang_library_version=config.yang_library_version,
    )
    handlers.register_all(dispatcher)
    dispatcher.freeze()
    return dispatcher


class RestconfServer:
    """
    A RESTCONF server.

    Usage:
        server = RestconfServer(ServerConfig.from_address(":8408"))
        server.run()          # blocks until SIGINT/SIGTERM or stop()

    Args:
        config: Server settings; defaults listen on :408.
        dispatcher: Pre-built route table (tests); built from config if
            omitted.

    Raises:
        ConfigurationError: Invalid config or route table.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        dispatcher: Optional[Dispatcher] = None
    ):
        self.config = config or ServerConfig()
        self.config.validate()

        if dispatcher is None:
            dispatcher = build_dispatcher(self.config)
        self._dispatcher = dispatcher

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(
            log_format=self.config.log_format,
            skip_paths=list(self.config.log_skip_paths),
        ))

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    # ─────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def handler(self) -> Callable[[HTTPRequest], HTTPResponse]:
        """The full request pipeline: middleware wrapped around dispatch."""
        if self._handler is None:
            self._handler = self._middleware.wrap(self._dispatcher.dispatch)
        return self._handler

    @property
    def bound_address(self) -> Optional[Tuple[str, int]]:
        return self._socket_server.bound_address

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def run(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """
        Serve until stopped (blocking).

        Raises:
            OSError: The listen address cannot be bound.
        """
        if host:
            self.config.host = host
        if port:
            self.config.port = port

        self._running = True
        self.handler  # build the pipeline before workers start
        self._thread_pool.start()

        for route in self._dispatcher.routes():
            logger.debug(f"Route {route.path} → {getattr(route.handler, '__name__', route.handler)}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def stop(self) -> None:
        """Ask a running server to stop; run() returns shortly after."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _shutdown(self) -> None:
        logger.info("Shutting down server")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.config.keep_alive_timeout + 1)
        logger.info("Server stopped")

    # ─────────────────────────────────────────────────────────────────────
    # Connection handling
    # ─────────────────────────────────────────────────────────────────────

    def _handle_connection(self, conn: Connection) -> None:
        if not self._thread_pool.submit(self._process_connection, conn):
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection) -> None:
        """Keep-alive loop for one connection (worker thread)."""
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "request timeout")
                    break
                except HTTPParseError as e:
                    self._send_error(conn, HTTPStatus(e.status_code), str(e))
                    break
                except OSError as e:
                    logger.debug(f"[{conn.id}] Read failed: {e}")
                    break

                if raw_request is None:
                    break

                try:
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.debug(f"[{conn.id}] Parse error: {e}")
                    self._send_error(conn, HTTPStatus(e.status_code), str(e))
                    break

                try:
                    response = self.handler(request)
                except Exception as e:
                    logger.exception(f"[{conn.id}] Handler error on {request.path}: {e}")
                    response = internal_error()

                keep_alive = request.is_keep_alive and self.config.keep_alive
                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                # HEAD: same head as GET, no body
                data = response.to_bytes(
                    self.config.server_name, include_body=request.method != "HEAD"
                )
                if not conn.send_response(data):
                    break

                if not keep_alive:
                    break

                conn.set_keep_alive()

    def _send_error(self, conn: Connection, status: HTTPStatus, message: str) -> None:
        """Plain-text error for failures before dispatch; closes afterwards."""
        response = error_response(status, message)
        response.headers["Connection"] = "close"
        conn.send_response(response.to_bytes(self.config.server_name))
