"""
Unit tests for HTTP request parsing.
"""

import io

import pytest

from fileserver.http.request import (
    HTTPRequest,
    RequestParser,
    ConnectionClosedError,
    parse_request,
)


def parse(raw: bytes) -> HTTPRequest:
    return parse_request(io.BytesIO(raw))


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(io.BytesIO(sample_get_request))

        assert request.method == "GET"
        assert request.path == "/echo/abc"
        assert request.version == "HTTP/1.1"
        assert request.body is None

    def test_parse_headers(self, sample_get_request: bytes):
        """Test that headers are parsed correctly."""
        request = parse(sample_get_request)

        assert request.headers == {
            "Host": "localhost:4221",
            "User-Agent": "pytest",
            "Accept-Encoding": "gzip",
        }
        assert request.user_agent == "pytest"

    def test_parse_post_with_body(self, sample_post_request: bytes):
        """Test parsing POST request with a body."""
        request = parse(sample_post_request)

        assert request.method == "POST"
        assert request.path == "/files/note.txt"
        assert request.body == "hello"
        assert request.should_close is True

    def test_query_string_is_part_of_path(self):
        """The path is kept verbatim, query included."""
        request = parse(b"GET /echo/a?b=c%20d HTTP/1.1\r\n\r\n")
        assert request.path == "/echo/a?b=c%20d"

    def test_bare_newline_line_endings(self):
        """LF-only requests are accepted."""
        request = parse(b"GET /user-agent HTTP/1.1\nUser-Agent: curl\n\n")

        assert request.path == "/user-agent"
        assert request.headers == {"User-Agent": "curl"}

    def test_parser_leaves_next_request_in_stream(self):
        """Two requests back to back are parsed one at a time."""
        stream = io.BytesIO(
            b"GET /a HTTP/1.1\r\n\r\n"
            b"POST /files/x HTTP/1.1\r\nContent-Length: 2\r\n\r\nhi"
            b"GET /b HTTP/1.1\r\n\r\n"
        )
        parser = RequestParser()

        assert parser.parse(stream).path == "/a"
        second = parser.parse(stream)
        assert second.body == "hi"
        assert parser.parse(stream).path == "/b"


class TestRequestLine:
    """A malformed request line is never rejected."""

    def test_missing_tokens_default_to_empty(self):
        request = parse(b"GET\r\n\r\n")

        assert request.method == "GET"
        assert request.path == ""
        assert request.version == ""

    def test_empty_request_line(self):
        request = parse(b"\r\n\r\n")

        assert request.method == ""
        assert request.path == ""

    def test_extra_tokens_ignored(self):
        request = parse(b"GET /echo/x HTTP/1.1 trailing junk\r\n\r\n")

        assert request.method == "GET"
        assert request.path == "/echo/x"
        assert request.version == "HTTP/1.1"

    def test_unknown_method_accepted(self):
        request = parse(b"BREW /pot HTTP/1.1\r\n\r\n")
        assert request.method == "BREW"

    def test_invalid_utf8_is_replaced(self):
        request = parse(b"GET /echo/\xff HTTP/1.1\r\n\r\n")
        assert request.path == "/echo/�"


class TestHeaders:
    """Tests for header parsing."""

    def test_names_are_case_sensitive(self):
        request = parse(b"GET / HTTP/1.1\r\nuser-agent: x\r\n\r\n")

        assert request.headers == {"user-agent": "x"}
        assert request.user_agent is None
        assert request.get_header("user-agent") == "x"
        assert request.get_header("User-Agent") == ""

    def test_whitespace_trimmed(self):
        request = parse(b"GET / HTTP/1.1\r\n  X-Thing  :   value  \r\n\r\n")
        assert request.headers == {"X-Thing": "value"}

    def test_split_on_first_colon(self):
        request = parse(b"GET / HTTP/1.1\r\nHost: localhost:4221\r\n\r\n")
        assert request.headers["Host"] == "localhost:4221"

    def test_line_without_colon_skipped(self):
        request = parse(b"GET / HTTP/1.1\r\nnot a header\r\nA: b\r\n\r\n")
        assert request.headers == {"A": "b"}

    def test_whitespace_line_does_not_end_headers(self):
        """Only an exactly-empty line terminates the header block."""
        request = parse(b"GET / HTTP/1.1\r\n   \r\nA: b\r\n\r\n")
        assert request.headers == {"A": "b"}

    def test_duplicate_header_last_wins(self):
        request = parse(b"GET / HTTP/1.1\r\nA: 1\r\nA: 2\r\n\r\n")
        assert request.headers == {"A": "2"}

    def test_empty_value(self):
        request = parse(b"GET / HTTP/1.1\r\nUser-Agent:\r\n\r\n")
        assert request.user_agent == ""


class TestBody:
    """Tests for Content-Length driven body reading."""

    def test_reads_exactly_content_length_bytes(self):
        stream = io.BytesIO(b"POST /files/a HTTP/1.1\r\nContent-Length: 3\r\n\r\nabcdef")
        request = RequestParser().parse(stream)

        assert request.body == "abc"
        assert stream.read() == b"def"

    def test_body_may_contain_crlf(self):
        request = parse(b"POST /files/a HTTP/1.1\r\nContent-Length: 6\r\n\r\na\r\n\r\nb")
        assert request.body == "a\r\n\r\nb"

    def test_no_content_length_no_body(self):
        stream = io.BytesIO(b"POST /files/a HTTP/1.1\r\n\r\nleftover")
        request = RequestParser().parse(stream)

        assert request.body is None
        assert stream.read() == b"leftover"

    def test_zero_content_length_no_body(self):
        request = parse(b"POST /files/a HTTP/1.1\r\nContent-Length: 0\r\n\r\n")
        assert request.body is None

    def test_leading_plus_accepted(self):
        request = parse(b"POST /files/a HTTP/1.1\r\nContent-Length: +2\r\n\r\nhi")
        assert request.body == "hi"

    @pytest.mark.parametrize("value", ["-1", "abc", "1.5", "", "3 4", "0x10"])
    def test_malformed_content_length_reads_nothing(self, value):
        raw = f"POST /files/a HTTP/1.1\r\nContent-Length: {value}\r\n\r\n".encode() + b"rest"
        stream = io.BytesIO(raw)
        request = RequestParser().parse(stream)

        assert request.body is None
        assert stream.read() == b"rest"

    def test_lowercase_content_length_ignored(self):
        request = parse(b"POST /files/a HTTP/1.1\r\ncontent-length: 2\r\n\r\nhi")
        assert request.body is None

    def test_invalid_utf8_body_is_replaced(self):
        request = parse(b"POST /files/a HTTP/1.1\r\nContent-Length: 2\r\n\r\na\xff")
        assert request.body == "a�"

    def test_multibyte_body(self):
        body = "héllo".encode("utf-8")
        raw = f"POST /files/a HTTP/1.1\r\nContent-Length: {len(body)}\r\n\r\n".encode() + body
        assert parse(raw).body == "héllo"


class TestEndOfStream:
    """EOF before a complete request raises ConnectionClosedError."""

    def test_empty_stream(self):
        with pytest.raises(ConnectionClosedError):
            parse(b"")

    def test_eof_inside_headers(self):
        with pytest.raises(ConnectionClosedError):
            parse(b"GET / HTTP/1.1\r\nHost: x\r\n")

    def test_eof_inside_body(self):
        with pytest.raises(ConnectionClosedError):
            parse(b"POST /files/a HTTP/1.1\r\nContent-Length: 10\r\n\r\nshort")

    def test_is_an_oserror(self):
        assert issubclass(ConnectionClosedError, ConnectionError)
        assert issubclass(ConnectionClosedError, OSError)


class TestHTTPRequest:
    """Tests for HTTPRequest properties."""

    @pytest.mark.parametrize("value", ["close", "Close", "CLOSE"])
    def test_should_close(self, value):
        request = HTTPRequest(method="GET", path="/", headers={"Connection": value})
        assert request.should_close is True

    @pytest.mark.parametrize("headers", [
        {},
        {"Connection": "keep-alive"},
        {"Connection": "close, keep-alive"},
        {"connection": "close"},
    ])
    def test_should_not_close(self, headers):
        request = HTTPRequest(method="GET", path="/", headers=headers)
        assert request.should_close is False

    def test_http10_stays_open(self):
        request = parse(b"GET / HTTP/1.0\r\n\r\n")
        assert request.should_close is False
