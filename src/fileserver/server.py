"""
=============================================================================
FILE SERVER
=============================================================================

This is the orchestrator that ties the components together: the acceptor,
one thread per connection, and the per-connection request/response loop.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      FILE SERVER ARCHITECTURE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   FileServer    │                          │
    │                        │ (Orchestrator)  │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │SocketServer  │    │RequestParser │    │    Router    │        │
    │    │ (Networking) │    │  (Parsing)   │    │ (Dispatching)│        │
    │    └──────┬───────┘    └──────────────┘    └──────┬───────┘        │
    │           ▼                                       ▼                 │
    │    ┌──────────────┐                        ┌──────────────┐        │
    │    │  Connection  │                        │   Handlers   │        │
    │    │ (one thread) │                        │ (text, files)│        │
    │    └──────────────┘                        └──────────────┘        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts TCP connection

    2. SPAWN THREAD
       └── One daemon thread per connection, no cap

    3. PARSE REQUEST
       └── RequestParser reads one request from the connection stream

    4. ROUTE DISPATCH
       └── Router matches method + path prefix → handler

    5. SERIALIZE
       └── HTTPResponse.to_bytes(request.headers, should_close)
           (gzip if the client accepts it)

    6. SEND RESPONSE
       └── Connection.send_response(bytes)

    7. KEEP-ALIVE OR CLOSE
       └── "Connection: close" ends the loop, anything else loops

=============================================================================
"""

import logging
import threading
import time
from typing import Optional

from .access_log import log_request
from .config import ServerConfig
from .core import SocketServer, Connection
from .http import RequestParser, ConnectionClosedError, Router
from .routes import create_router


logger = logging.getLogger(__name__)


class FileServer:
    """
    HTTP/1.1 file server.

    =========================================================================
    USAGE
    =========================================================================

        server = FileServer(ServerConfig(directory="/srv/files"))
        server.run()   # Blocks until Ctrl+C

    From another thread (tests):

        server = FileServer(ServerConfig(directory=tmp, port=0))
        threading.Thread(target=server.run, daemon=True).start()
        server.wait_until_listening(5.0)
        host, port = server.address
        ...
        server.stop()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        # ─────────────────────────────────────────────────────────────────
        # CORE COMPONENTS
        # ─────────────────────────────────────────────────────────────────

        self._socket_server = SocketServer(self.config)

        # Stateless, shared by every connection thread
        self._parser = RequestParser()

        # Built once, read-only afterwards
        self._router = create_router(self.config.directory)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """The (host, port) actually bound."""
        return self._socket_server.server_address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Returns after stop() or Ctrl+C.

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        self._setup_logging()

        logger.info(
            f"Serving {self.config.directory.resolve()} "
            f"on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def stop(self):
        """Stop accepting connections. Open connections finish on their own."""
        self._socket_server.shutdown()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_listening(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        # No-op if the root logger is already configured (e.g. under pytest)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("fileserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Hand a new connection to its own thread.

        Called by SocketServer for each accepted connection.
        """
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """
        Serve requests on one connection until it closes.

        =====================================================================
        CONNECTION PROCESSING LOOP
        =====================================================================

            OPEN ──► parse ──► dispatch ──► serialize ──► write
             ▲                                              │
             └──────────── keep-alive ◄─────────────────────┤
                                                            │
                       parse failure / write failure /      │
                       "Connection: close"                  ▼
                                                          CLOSED

        Errors here end only this connection; they never reach the
        acceptor or other connections.

        =====================================================================
        """
        with conn:  # Context manager ensures connection is closed
            while True:
                # ─────────────────────────────────────────────────────────
                # PARSE REQUEST
                # ─────────────────────────────────────────────────────────
                try:
                    request = self._parser.parse(conn.reader)
                except ConnectionClosedError as e:
                    logger.debug(f"[{conn.id}] {e}")
                    break
                except OSError as e:
                    # Reset, timeout, ...
                    logger.warning(f"[{conn.id}] Failed to read request: {e}")
                    break

                # Decided per request, from this request only
                should_close = request.should_close

                # ─────────────────────────────────────────────────────────
                # DISPATCH + SERIALIZE
                # ─────────────────────────────────────────────────────────
                started_at = time.time()
                response = self._router.handle(request)
                data = response.to_bytes(request.headers, close_connection=should_close)

                log_request(
                    connection_id=conn.id,
                    client_ip=conn.client_ip,
                    method=request.method,
                    path=request.path,
                    status_code=int(response.status),
                    content_length=len(data),
                    started_at=started_at,
                )

                # ─────────────────────────────────────────────────────────
                # SEND RESPONSE
                # ─────────────────────────────────────────────────────────
                if not conn.send_response(data):
                    break

                if should_close:
                    break
