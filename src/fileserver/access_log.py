"""
=============================================================================
ACCESS LOGGING
=============================================================================

One line per served request on a dedicated logger:

    127.0.0.1 - - [18/Oct/2026:10:15:02 +0000] "GET /echo/abc" 200 3 0.41ms

The logger is namespaced so it can be routed separately from the
diagnostic logs:

    logging.getLogger("fileserver.access").setLevel(logging.WARNING)  # mute
    logging.getLogger("fileserver.access").addHandler(file_handler)

=============================================================================
"""

import time
import logging
from dataclasses import dataclass


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one request/response exchange.

    connection_id:  Short id of the connection that carried the request
    client_ip:      Client's IP address
    method:         HTTP method as sent (may be empty for a blank line)
    path:           Request path as sent
    status_code:    Response status
    content_length: Bytes written on the wire (headers included)
    duration_ms:    Dispatch plus serialization time
    timestamp:      When the response was built
    """

    connection_id: str
    client_ip: str
    method: str
    path: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        """Format in the Apache common log style."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(
    connection_id: str,
    client_ip: str,
    method: str,
    path: str,
    status_code: int,
    content_length: int,
    started_at: float,
) -> RequestLog:
    """
    Build the entry for one exchange and emit it at INFO.

    Args:
        started_at: time.time() taken before dispatch.

    Returns:
        The emitted entry.
    """
    entry = RequestLog(
        connection_id=connection_id,
        client_ip=client_ip,
        method=method,
        path=path,
        status_code=status_code,
        content_length=content_length,
        duration_ms=(time.time() - started_at) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )
    logger.info(f"[{connection_id}] {entry.to_text()}")
    return entry
