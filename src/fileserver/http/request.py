"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

This module turns the byte stream of a client connection into HTTPRequest
objects, one request per call.

=============================================================================
READING FROM A STREAM, NOT FROM A BUFFER
=============================================================================

The parser reads directly from a buffered binary stream (the socket wrapped
with socket.makefile("rb")). The stream does the buffering for us:

    readline()   returns bytes up to and including the next b"\\n"
    read(n)      returns exactly n bytes, or fewer only at EOF

So the parser never has to look for \\r\\n\\r\\n in a growing buffer. It
consumes exactly one request and leaves the stream positioned at the
first byte of the next one, which is what a keep-alive connection needs.

    ┌─────────────────────────────────────────────────────────────────┐
    │  GET /echo/abc HTTP/1.1\\r\\n          ← readline(): request line │
    │  Host: localhost:4221\\r\\n            ← readline(): header        │
    │  Content-Length: 5\\r\\n               ← readline(): header        │
    │  \\r\\n                                ← readline(): end of headers│
    │  hello                                ← read(5): body            │
    ├─────────────────────────────────────────────────────────────────┤
    │  GET / HTTP/1.1\\r\\n                  ← next request, untouched   │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
LENIENT PARSING
=============================================================================

The parser never answers a malformed request with an error. It degrades:

    Malformed request line      "GET"           → path = "", version = ""
    Header line without colon   "garbage"       → skipped
    Bad Content-Length          "-5", "abc"     → no body, nothing read
    Invalid UTF-8 in body       b"\\xff"         → U+FFFD replacement

The only failures are transport failures: the stream raising OSError, or
the peer closing the connection before a whole request arrived
(ConnectionClosedError).

=============================================================================
HEADER NAMES ARE CASE-SENSITIVE HERE
=============================================================================

RFC 7230 says header names are case-insensitive. This server stores them
exactly as sent and looks them up exactly as written ("Content-Length",
"Accept-Encoding", "Connection", "User-Agent"). Duplicate names collapse to
the last value seen.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional
import re


class ConnectionClosedError(ConnectionError):
    """
    Raised when the peer closes the stream before a full request arrived.

    Subclasses ConnectionError (and therefore OSError) so the connection
    loop can treat it like any other transport failure.
    """


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Attributes:
        method: Request method token ("GET", "POST", ...), "" if missing.
        path: Origin-form path exactly as sent, "" if missing.
        version: Protocol version token, "" if missing.
        headers: Header name → value. Names keep their original case,
                 repeated names keep the last value.
        body: Request body decoded as UTF-8 (lossy), or None when no usable
              Content-Length was sent.
        path_params: Filled in by the router, e.g. {"tail": "note.txt"}
                     for GET /files/note.txt.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    # Router-injected parameters
    path_params: Dict[str, str] = field(default_factory=dict)

    @property
    def user_agent(self) -> Optional[str]:
        """The User-Agent header value, if the client sent one."""
        return self.headers.get("User-Agent")

    @property
    def should_close(self) -> bool:
        """
        Whether the connection must be closed after this request's response.

        Only an explicit "Connection: close" ends the connection; the value
        is compared case-insensitively, the header name is not. Everything
        else, HTTP/1.0 requests included, keeps the connection open.
        """
        return self.headers.get("Connection", "").lower() == "close"

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value by its exact name.

        Example:
            request.get_header("Accept-Encoding")   # matches
            request.get_header("accept-encoding")   # does not
        """
        return self.headers.get(name, default)


class RequestParser:
    """
    Reads one HTTP request at a time from a binary stream.

    =========================================================================
    PARSING ALGORITHM
    =========================================================================

        1. readline()            → request line, split on whitespace
        2. readline() until an   → headers, split on the first ":"
           empty line
        3. Content-Length valid? → read(n) the body, decode leniently

    =========================================================================

    The parser holds no per-request state, so a single instance can be
    shared by every connection thread.
    """

    # Unsigned integer as accepted for Content-Length: ASCII digits with an
    # optional leading "+". No sign, no spaces, no underscores.
    CONTENT_LENGTH_PATTERN = re.compile(r"\+?[0-9]+", re.ASCII)

    HEADER_TERMINATORS = (b"\r\n", b"\n")

    def parse(self, stream: BinaryIO) -> HTTPRequest:
        """
        Parse the next request from the stream.

        Args:
            stream: Binary file-like object with readline() and read(n).

        Returns:
            The parsed HTTPRequest.

        Raises:
            ConnectionClosedError: EOF before the request was complete.
            OSError: The underlying stream failed (reset, timeout, ...).
        """
        method, path, version = self._parse_request_line(self._read_line(stream))
        headers = self._parse_headers(stream)
        body = self._read_body(stream, headers)

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
        )

    def _read_line(self, stream: BinaryIO) -> bytes:
        line = stream.readline()
        if not line:
            raise ConnectionClosedError("Connection closed while reading request")
        return line

    def _parse_request_line(self, line: bytes) -> tuple[str, str, str]:
        """
        Split "METHOD SP PATH SP VERSION" into its three tokens.

        Missing tokens become "", tokens past the third are ignored.
        """
        parts = line.decode("utf-8", errors="replace").split()
        parts += [""] * (3 - len(parts))
        return parts[0], parts[1], parts[2]

    def _parse_headers(self, stream: BinaryIO) -> Dict[str, str]:
        """
        Read header lines up to the blank line that ends the header block.

        Only a line that is exactly b"\\r\\n" or b"\\n" ends the block; a
        line of spaces is just a header line without a colon.
        """
        headers: Dict[str, str] = {}

        while True:
            line = self._read_line(stream)
            if line in self.HEADER_TERMINATORS:
                break

            name, sep, value = line.decode("utf-8", errors="replace").partition(":")
            if not sep:
                continue  # no colon, skip

            headers[name.strip()] = value.strip()

        return headers

    def _read_body(self, stream: BinaryIO, headers: Dict[str, str]) -> Optional[str]:
        length = self._content_length(headers)
        if not length:
            return None

        data = stream.read(length)
        if len(data) < length:
            raise ConnectionClosedError(
                f"Connection closed mid-body: expected {length} bytes, got {len(data)}"
            )

        return data.decode("utf-8", errors="replace")

    def _content_length(self, headers: Dict[str, str]) -> Optional[int]:
        """Content-Length as an int, or None if absent or malformed."""
        value = headers.get("Content-Length")
        if value is None or not self.CONTENT_LENGTH_PATTERN.fullmatch(value):
            return None
        return int(value)


def parse_request(stream: BinaryIO) -> HTTPRequest:
    """Parse a single request from the stream with a default parser."""
    return RequestParser().parse(stream)
