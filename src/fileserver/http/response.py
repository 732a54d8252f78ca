"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Serializes HTTP/1.1 responses into the exact bytes written to the socket.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK\\r\\n                   ← status line (always)       │
    │  Connection: close\\r\\n                 ← only if closing           │
    │  Content-Encoding: gzip\\r\\n            ← only if body was gzipped  │
    │  Content-Type: text/plain\\r\\n          ← only if a type was given  │
    │  Content-Length: 3\\r\\n                 ← only if body non-empty    │
    │  \\r\\n                                  ← end of headers            │
    │  abc                                   ← body bytes, if any        │
    └─────────────────────────────────────────────────────────────────────┘

Every header is conditional, and they are always emitted in this order.
There is no Date or Server header.

=============================================================================
CONTENT-LENGTH IS THE TRANSMITTED LENGTH
=============================================================================

When the body is gzipped, Content-Length counts the COMPRESSED bytes, since
that is what the client reads off the wire:

    body = b"abc"            (3 bytes)
    gzip(body)               (23 bytes)
    Content-Length: 23

An empty body gets no Content-Length at all. A response with no
Content-Length and no Connection: close leaves the client to assume an
empty body, which is what every no-body status here (201, 400, 404, 500)
means.

=============================================================================
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Union

from .compression import accepts_gzip, gzip_body
from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    A response waiting to be serialized.

    Handlers return these; the connection loop serializes them with
    to_bytes() once it knows the request headers and whether the
    connection is closing.

    Attributes:
        status: Status code.
        body: Body bytes before compression, or None for no body.
        content_type: Content-Type value, or None to omit the header.
    """

    status: HTTPStatus = HTTPStatus.OK
    body: Optional[bytes] = None
    content_type: Optional[str] = None

    @property
    def status_line(self) -> str:
        """
        The HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 Not Found"
        """
        return f"HTTP/1.1 {int(self.status)} {self.status.phrase}"

    def to_bytes(
        self,
        request_headers: Mapping[str, str],
        close_connection: bool = False,
    ) -> bytes:
        """
        Serialize the response.

        =====================================================================
        SERIALIZATION STEPS
        =====================================================================

            1. Status line
            2. Connection: close           if close_connection
            3. gzip the body               if a body exists and the request
               + Content-Encoding: gzip    accepts gzip
            4. Content-Type                if set
            5. Content-Length              if transmitted body non-empty
            6. Blank line + body

        =====================================================================

        Args:
            request_headers: Headers of the request being answered; only
                             Accept-Encoding is consulted.
            close_connection: Emit "Connection: close".

        Returns:
            Complete response bytes ready for socket.sendall().
        """
        lines = [self.status_line]

        if close_connection:
            lines.append("Connection: close")

        payload = b""
        if self.body is not None:
            if accepts_gzip(request_headers):
                payload = gzip_body(self.body)
                lines.append("Content-Encoding: gzip")
            else:
                payload = self.body

        if self.content_type is not None:
            lines.append(f"Content-Type: {self.content_type}")

        if payload:
            lines.append(f"Content-Length: {len(payload)}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + payload


def build_response(
    request_headers: Mapping[str, str],
    status: HTTPStatus,
    body: Optional[bytes] = None,
    content_type: Optional[str] = None,
    close_connection: bool = False,
) -> bytes:
    """
    Build the wire bytes of a response in one call.

    Example:
        build_response({"Accept-Encoding": "gzip"}, HTTPStatus.OK,
                       b"abc", "text/plain")
    """
    response = HTTPResponse(status=status, body=body, content_type=content_type)
    return response.to_bytes(request_headers, close_connection)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the route handlers produce:
#
#     return ok("abc", "text/plain")
#     return created()
#     return not_found()
#
# =============================================================================

def ok(body: Union[str, bytes, None] = None, content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    Strings are encoded as UTF-8; None means no body at all (not an empty
    body).
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    return HTTPResponse(status=HTTPStatus.OK, body=body, content_type=content_type)


def created() -> HTTPResponse:
    """201 Created, no body. Sent after a successful upload."""
    return HTTPResponse(status=HTTPStatus.CREATED)


def bad_request() -> HTTPResponse:
    """400 Bad Request, no body."""
    return HTTPResponse(status=HTTPStatus.BAD_REQUEST)


def not_found() -> HTTPResponse:
    """404 Not Found, no body."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)


def internal_error() -> HTTPResponse:
    """500 Internal Server Error, no body. The cause is only logged."""
    return HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR)
