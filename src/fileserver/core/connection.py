"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

This module wraps one accepted client socket with the API the connection
loop needs: a buffered read stream for the parser, an all-or-nothing write,
and a clean close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries:

    Client sends:
        send("GET / HTTP/1.1\\r\\n\\r\\n")

    Server might receive:
        recv() → "GET / HT"
        recv() → "TP/1.1\\r\\n\\r\\n"

Instead of buffering recv() chunks by hand, the socket is wrapped in a
buffered binary file with socket.makefile("rb"). The parser then asks for
"the next line" or "the next n bytes" and the file object keeps whatever
is left over for the next request on the same connection.

    ┌──────────────┐   recv()   ┌──────────────────┐  readline()  ┌────────┐
    │  socket      │──────────► │ BufferedReader   │────────────► │ parser │
    │  (kernel)    │            │ (connection.     │  read(n)     │        │
    │              │            │  reader)         │              │        │
    └──────────────┘            └──────────────────┘              └────────┘

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    OPEN ──── parse ── dispatch ── write ──┐
     ▲                                      │ keep-alive
     └──────────────────────────────────────┘
     │
     │ parse failure / write failure / Connection: close
     ▼
    CLOSED   (terminal: no more reads or writes)

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states."""
    OPEN = "open"        # Accepted, serving requests
    CLOSED = "closed"    # Torn down, socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier for log lines.
        state: OPEN until close() runs.
        created_at: Timestamp when the connection was accepted.
        requests_handled: Responses successfully written so far.
        timeout: Socket timeout in seconds, None to block forever.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.OPEN
    created_at: float = field(default_factory=time.time)
    requests_handled: int = 0

    # Configuration (passed from ServerConfig)
    timeout: Optional[float] = None

    # Internal state (not shown in repr for cleaner logs)
    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """
        Configure the socket after initialization.

        Called automatically by dataclass after __init__.
        """
        # settimeout(None) puts the socket in plain blocking mode
        self.socket.settimeout(self.timeout)
        self._reader = self.socket.makefile("rb")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """Buffered read stream over the socket, handed to the parser."""
        return self._reader

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a large body is never half-written.

        Args:
            data: Serialized response.

        Returns:
            True if everything was sent, False if the connection is gone.
        """
        try:
            self.socket.sendall(data)
        except OSError as e:
            # Client disconnected, reset, or timed out
            logger.warning(f"[{self.id}] Failed to write response: {e}")
            return False

        self.requests_handled += 1
        return True

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR): send FIN so the client sees end-of-stream
           right after the last response
        2. close the read stream and the socket, releasing the descriptor

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return  # Already closed

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self._reader.close()
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(
            f"[{self.id}] Connection closed after {self.requests_handled} requests "
            f"({self.age:.3f}s)"
        )

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows `with conn:` so the socket is closed however the loop ends:

            with conn:
                request = parser.parse(conn.reader)
                conn.send_response(data)
            # Connection closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
