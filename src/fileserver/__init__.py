"""
=============================================================================
FILESERVER - Minimal HTTP/1.1 File Server Built From Raw Sockets
=============================================================================

A small single-host HTTP/1.1 server that:

    - serves files from a directory          GET  /files/<name>
    - stores uploaded files                  POST /files/<name>
    - echoes a path segment                  GET  /echo/<text>
    - reports the client's User-Agent        GET  /user-agent

with keep-alive connections and gzip content negotiation.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # FileServer and the connection loop
    ├── config.py            # ServerConfig dataclass
    ├── routes.py            # The routing table
    ├── access_log.py        # One log line per request
    ├── core/                # Low-level components
    │   ├── socket_server.py # TCP socket handling
    │   └── connection.py    # Connection wrapper
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response serialization
    │   ├── compression.py   # gzip negotiation
    │   ├── router.py        # Prefix routing
    │   └── status_codes.py  # HTTP status enum
    └── handlers/            # Request handlers
        ├── text.py          # /, /echo/, /user-agent
        └── files.py         # /files/

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileServer, ServerConfig

    FileServer(ServerConfig(directory="/tmp/files")).run()

or from the shell:

    python -m fileserver --directory /tmp/files

=============================================================================
"""

__version__ = "1.0.0"

from .server import FileServer
from .config import ServerConfig

__all__ = ["FileServer", "ServerConfig", "__version__"]
