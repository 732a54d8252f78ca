"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The low-level networking plumbing under the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the TCP listening socket                                 │
    │  • Binds to IP:PORT and listens for connections                     │
    │  • Runs the accept() loop, hands each client off                    │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Hands off new connections
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Wraps a client socket with a buffered read stream                │
    │  • All-or-nothing response writes                                   │
    │  • Tracks state (OPEN → CLOSED)                                     │
    └─────────────────────────────────────────────────────────────────────┘

THREAD-PER-CONNECTION MODEL
    Each connection is served by its own thread (see server.py). Simple
    to follow, and blocking I/O only ever stalls the thread that owns it.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # TCP acceptor
    "Connection",       # Wrapper for client socket
    "ConnectionState",  # OPEN / CLOSED
]
