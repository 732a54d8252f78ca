"""
=============================================================================
ROUTING TABLE
=============================================================================

The file server's complete set of routes, in match order:

    ┌────────┬──────────────┬────────┬──────────────────────────────────┐
    │ Method │ Path         │ Match  │ Handler                          │
    ├────────┼──────────────┼────────┼──────────────────────────────────┤
    │ GET    │ /            │ exact  │ index       → 200                │
    │ GET    │ /echo/       │ prefix │ echo        → 200 text/plain     │
    │ GET    │ /user-agent  │ prefix │ user_agent  → 200 text/plain     │
    │ GET    │ /files       │ prefix │ read_file   → 200 / 404          │
    │ POST   │ /files/      │ prefix │ write_file  → 201 / 400 / 500    │
    │ *      │ *            │        │ (router)    → 404                │
    └────────┴──────────────┴────────┴──────────────────────────────────┘

Note the asymmetry: GET matches "/files" while POST needs "/files/".

=============================================================================
"""

import functools
from pathlib import Path
from typing import Optional, Tuple, Union

from .handlers import FileHandler, index, echo, user_agent
from .http.request import HTTPRequest
from .http.router import Router
from .http.status_codes import HTTPStatus


def create_router(directory: Union[str, Path]) -> Router:
    """
    Build the routing table for a serving directory.

    Args:
        directory: Root directory for /files.

    Returns:
        A Router ready to be shared by all connections.
    """
    router = Router()
    files = FileHandler(directory)

    router.get("/", exact=True)(index)
    router.get("/echo/", strip="/echo/")(echo)
    router.get("/user-agent")(user_agent)
    router.get("/files", strip="/files/")(files.read_file)
    router.post("/files/", strip="/files/")(files.write_file)

    return router


@functools.lru_cache(maxsize=None)
def _router_for(directory: Path) -> Router:
    return create_router(directory)


def dispatch(
    request: HTTPRequest,
    root_dir: Union[str, Path],
) -> Tuple[HTTPStatus, Optional[bytes], Optional[str]]:
    """
    Route one request.

    The table for each root directory is built on first use and reused by
    later calls. FileServer holds its own router and does not go through
    here.

    Returns:
        (status, body, content_type); body and content_type may be None.
    """
    response = _router_for(Path(root_dir)).handle(request)
    return response.status, response.body, response.content_type
