"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized, immutable configuration for the file server.

=============================================================================
WHY FROZEN?
=============================================================================

One ServerConfig is created at startup and then read by every connection
thread at once. Making the dataclass frozen guarantees nobody mutates it
after the threads start, so no locking is needed:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   main thread            ServerConfig (frozen)                       │
    │   ───────────            ─────────────────────                       │
    │   parse CLI  ──create──►  directory=/srv/files                      │
    │                           host=127.0.0.1                             │
    │                           port=4221                                  │
    │                                │                                     │
    │              ┌─────────────────┼─────────────────┐                   │
    │              ▼                 ▼                 ▼                   │
    │         connection 1      connection 2      connection 3            │
    │         (read only)       (read only)       (read only)             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

To change a value, derive a new instance:

    config = dataclasses.replace(config, port=8080)

=============================================================================
CONFIGURATION SOURCES
=============================================================================

Only two:

    1. Command-line arguments (--directory)
    2. Default values (in this dataclass)

There are no environment variables and no config files.

=============================================================================
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    SERVING
    - directory

    NETWORK SETTINGS
    - host, port, backlog, timeout

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVING
    # ─────────────────────────────────────────────────────────────────────

    directory: Path = field(default_factory=lambda: Path("."))
    """
    Root directory for GET/POST /files/<name>.
    Not required to exist: reads from a missing root simply 404.
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Loopback only; the server is meant for a single host."""

    port: int = 4221
    """
    The port number to listen on.
    0 lets the OS pick a free port (see SocketServer.server_address).
    """

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = blocking: a stalled client holds its thread until the transport
    gives up. Set a value to have idle or slow connections closed.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    def __post_init__(self):
        # Accept plain strings for the directory
        object.__setattr__(self, "directory", Path(self.directory))

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at server construction so a bad value fails at startup,
        not on the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
