"""
=============================================================================
REQUEST HANDLERS
=============================================================================

Handlers take an HTTPRequest and return an HTTPResponse. They never touch
the socket and never raise for expected failures: a missing file or a
failed write becomes a status code.

    text.py     index, echo, user_agent
    files.py    FileHandler (read_file, write_file)

=============================================================================
USAGE
=============================================================================

    from fileserver.handlers import FileHandler, echo

    files = FileHandler("/srv/files")
    router.get("/echo/", strip="/echo/")(echo)
    router.get("/files", strip="/files/")(files.read_file)

=============================================================================
"""

from .files import FileHandler
from .text import index, echo, user_agent

__all__ = [
    "FileHandler",
    "index",
    "echo",
    "user_agent",
]
