"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

The HTTP/1.1 layer of the file server: turning a byte stream into requests,
requests into handler calls, and responses back into bytes.

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSER (request.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   socket stream  b"GET /echo/hi HTTP/1.1\r\n...\r\n\r\n"     │
    │ Output:  HTTPRequest(method="GET", path="/echo/hi", ...)            │
    │                                                                      │
    │   • Lenient request line (missing tokens → "")                      │
    │   • Case-sensitive header names, last value wins                    │
    │   • Body read by Content-Length, decoded leniently                  │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE BUILDER (response.py, compression.py)                      │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   HTTPResponse(status=200, body=b"hi", content_type=...)     │
    │ Output:  b"HTTP/1.1 200 OK\r\nContent-Type: ...\r\n\r\nhi"          │
    │                                                                      │
    │   • gzip when Accept-Encoding mentions it                           │
    │   • Content-Length of the transmitted bytes                         │
    │   • Connection: close when the loop is about to hang up             │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ROUTER (router.py)                                                  │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   GET /files/note.txt                                        │
    │ Output:  read_file(request), path_params={"tail": "note.txt"}       │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ STATUS CODES (status_codes.py)                                      │
    │ ─────────────────────────────────────────────────────────────────── │
    │ HTTPStatus.NOT_FOUND → 404, phrase="Not Found"                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest, RequestParser, ConnectionClosedError, parse_request
from .response import (
    HTTPResponse,
    build_response,
    ok,             # 200 OK
    created,        # 201 Created
    bad_request,    # 400 Bad Request
    not_found,      # 404 Not Found
    internal_error,  # 500 Internal Server Error
)
from .compression import accepts_gzip, gzip_body
from .router import Router, Route, RouteMatch, MatchType
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "ConnectionClosedError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "build_response",
    "accepts_gzip",
    "gzip_body",

    # Response convenience functions
    "ok",
    "created",
    "bad_request",
    "not_found",
    "internal_error",

    # Routing
    "Router",
    "Route",
    "RouteMatch",
    "MatchType",

    # Status codes
    "HTTPStatus",
]
