"""
=============================================================================
TRANSPORT CORE
=============================================================================

    socket_server.py   listening socket and accept loop
    connection.py      one client: buffered request reads, response writes
    thread_pool.py     workers that run one connection each

None of this knows about RESTCONF; RestconfServer plugs the dispatcher
in on top.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "ThreadPool",
]
