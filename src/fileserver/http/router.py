"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler by plain string matching:

- Exact paths: "/" matches only "/"
- Prefix paths: "/echo/" matches "/echo/abc", "/echo/", "/echo//x"
- Method filter: a GET route never answers a POST

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Incoming Request                                                   │
    │   GET /files/note.txt                                                │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER (first match wins, in registration order)            │   │
    │   │                                                              │   │
    │   │  GET  /            exact   → index                           │   │
    │   │  GET  /echo/       prefix  → echo                            │   │
    │   │  GET  /user-agent  prefix  → user_agent                      │   │
    │   │  GET  /files       prefix  → read_file     ← MATCH!          │   │
    │   │  POST /files/      prefix  → write_file                      │   │
    │   │                                                              │   │
    │   │  strip "/files/"  → path_params = {"tail": "note.txt"}       │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   read_file(request)                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PREFIX MATCHING IS NOT SEGMENT-AWARE
=============================================================================

    Pattern (prefix): /files
    Matches:          /files/a.txt, /files, /filesXYZ, /files/../etc

A route can strip a prefix to produce the "tail" parameter. Stripping
removes EVERY leading repetition of the prefix, and leaves the path alone
if it doesn't start with it:

    strip "/echo/"   /echo/abc          → "abc"
    strip "/echo/"   /echo//echo/abc    → "abc"
    strip "/files/"  /filesXYZ          → "/filesXYZ"

Unmatched requests get a 404 with no body. There is no 405: the method is
just part of the match.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .request import HTTPRequest
from .response import HTTPResponse, not_found


# Handler: A function that takes a request and returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


class MatchType(Enum):
    """How a route's path is compared against the request path."""
    EXACT = "exact"     # /      - whole path must be equal
    PREFIX = "prefix"   # /echo/ - path must start with it


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/files",              # pattern compared to request.path
            method="GET",               # method filter (exact, case-sensitive)
            handler=read_file,
            match_type=MatchType.PREFIX,
            strip="/files/",            # prefix removed to form "tail"
        )
    """

    path: str
    method: str
    handler: Handler
    match_type: MatchType = MatchType.PREFIX
    strip: Optional[str] = None

    def matches(self, method: str, path: str) -> bool:
        if method != self.method:
            return False
        if self.match_type is MatchType.EXACT:
            return path == self.path
        return path.startswith(self.path)

    def tail(self, path: str) -> str:
        """The request path with every leading copy of `strip` removed."""
        if not self.strip:
            return path
        while path.startswith(self.strip):
            path = path[len(self.strip):]
        return path


@dataclass
class RouteMatch:
    """Result of a successful match: the route and the stripped tail."""
    route: Route
    tail: str


class Router:
    """
    Ordered prefix router.

    Routes are registered with decorators:

        router = Router()

        @router.get("/", exact=True)
        def index(request):
            return ok()

        @router.get("/echo/", strip="/echo/")
        def echo(request):
            return ok(request.path_params["tail"], "text/plain")

    The router is built once at startup and only read afterwards, so one
    instance is safely shared by every connection thread.
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: str,
        exact: bool = False,
        strip: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: Exact path or path prefix to match.
            handler: Function taking the request and returning a response.
            method: Method token the route answers to.
            exact: Require the whole path to equal `path`.
            strip: Prefix removed from the path to build the "tail" param.

        Returns:
            The registered Route.
        """
        route = Route(
            path=path,
            method=method,
            handler=handler,
            match_type=MatchType.EXACT if exact else MatchType.PREFIX,
            strip=strip,
        )
        self._routes.append(route)
        return route

    def route(self, path: str, method: str, exact: bool = False, strip: Optional[str] = None):
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, exact=exact, strip=strip)
            return handler
        return decorator

    def get(self, path: str, exact: bool = False, strip: Optional[str] = None):
        return self.route(path, "GET", exact=exact, strip=strip)

    def post(self, path: str, exact: bool = False, strip: Optional[str] = None):
        return self.route(path, "POST", exact=exact, strip=strip)

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching the method and path.

        Order matters: first-registered, first-matched.
        """
        for route in self._routes:
            if route.matches(method, path):
                return RouteMatch(route=route, tail=route.tail(path))
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Injects the stripped tail as request.path_params["tail"] and returns
        the handler's response, or a bare 404 if nothing matched.
        """
        match = self.match(request.method, request.path)
        if match is None:
            return not_found()

        request.path_params = {"tail": match.tail}
        return match.route.handler(request)

    @property
    def routes(self) -> List[Route]:
        """Registered routes, in match order."""
        return list(self._routes)
