"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes the file server can put on the wire, with the reason phrases
used in the status line.

    HTTP/1.1 201 Created
             ─── ───────
              │     │
              │     └── Reason phrase
              └──────── Status code

The routing table only ever answers with a handful of codes:

    200 OK                      /, /echo/*, /user-agent, GET /files/*
    201 Created                 POST /files/* written to disk
    400 Bad Request             POST /files/* without a body
    404 Not Found               unknown route, unreadable file
    500 Internal Server Error   POST /files/* could not be written

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    NOT_FOUND = 404

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
