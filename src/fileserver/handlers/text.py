"""
Plain-text endpoints: the index, /echo/<text> and /user-agent.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok


TEXT_CONTENT_TYPE = "text/plain"

UNKNOWN_USER_AGENT = "Unknown"


def index(request: HTTPRequest) -> HTTPResponse:
    """GET / → 200 with no body."""
    return ok()


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    GET /echo/<text> → 200 with <text> as the body.

    The text is echoed exactly as it appears in the request path; no
    percent-decoding.
    """
    return ok(request.path_params.get("tail", ""), TEXT_CONTENT_TYPE)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """GET /user-agent → 200 with the User-Agent header, or "Unknown"."""
    agent = request.user_agent
    if agent is None:
        agent = UNKNOWN_USER_AGENT
    return ok(agent, TEXT_CONTENT_TYPE)
