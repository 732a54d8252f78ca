"""
=============================================================================
GZIP CONTENT NEGOTIATION
=============================================================================

Decides whether a response body goes out gzip-compressed, and compresses it.

=============================================================================
CONTENT NEGOTIATION
=============================================================================

The client lists the encodings it understands:

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │ GET /echo/abc HTTP/1.1                                        │
    │ Accept-Encoding: deflate, gzip, br                            │
    └───────────────────────────────────────────────────────────────┘

    Response:
    ┌───────────────────────────────────────────────────────────────┐
    │ HTTP/1.1 200 OK                                               │
    │ Content-Encoding: gzip                                        │
    │ Content-Type: text/plain                                      │
    │ Content-Length: 23        (compressed size)                   │
    │                                                               │
    │ [gzip compressed body]                                        │
    └───────────────────────────────────────────────────────────────┘

The check here is deliberately simple: a plain substring search for "gzip"
in the Accept-Encoding value. No q-values, no token parsing, and the header
name must be spelled exactly "Accept-Encoding".

    "gzip"                    → gzip
    "deflate, gzip;q=0.5"     → gzip
    "x-gzip"                  → gzip   (substring match)
    "GZIP"                    → identity (case-sensitive)
    "gzip;q=0"                → gzip   (q-values are not interpreted)

Unlike a general-purpose compression middleware, there is no minimum size
and no content-type filter: if the client accepts gzip, every body is
compressed, including empty ones.

=============================================================================
COMPRESSION LEVELS
=============================================================================

    Level 1:  Fastest compression, lowest ratio
    Level 6:  Balanced (zlib default) - used here
    Level 9:  Best compression, slowest (gzip.compress default!)

gzip.compress() defaults to level 9, so the level is always passed
explicitly.

=============================================================================
"""

import gzip
from typing import Mapping


DEFAULT_COMPRESSION_LEVEL = 6


def accepts_gzip(request_headers: Mapping[str, str]) -> bool:
    """True if the request's Accept-Encoding value contains "gzip"."""
    return "gzip" in request_headers.get("Accept-Encoding", "")


def gzip_body(body: bytes, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """
    Compress a body into a complete gzip member.

    Args:
        body: Uncompressed bytes (may be empty).
        level: Compression level, 1-9.

    Returns:
        gzip-framed bytes; gzip.decompress() gives back the input.
    """
    return gzip.compress(body, compresslevel=level)
