"""
=============================================================================
FILE HANDLER
=============================================================================

Serves and stores files under the configured root directory.

    GET  /files/<name>   → 200 + file bytes, or 404
    POST /files/<name>   → 201 once written, 500 if the write failed,
                           400 if the request had no body

=============================================================================
PATH HANDLING
=============================================================================

The name is joined onto the root with pathlib, as-is:

    root / "note.txt"          → <root>/note.txt
    root / "sub/note.txt"      → <root>/sub/note.txt
    root / "../secret"         → <root>/../secret     (NOT sanitized!)
    root / "/filesXYZ"         → /filesXYZ            (absolute wins)

There is no path traversal check and no resolve(); a name that climbs out
of the root is served from wherever it lands. Treat the root directory
as the only thing this server should be pointed at on a trusted host.

=============================================================================
ERROR MAPPING
=============================================================================

The client only ever sees a status code. The cause goes to the log:

    read:  FileNotFoundError, PermissionError,      → 404
           IsADirectoryError, any other OSError
    write: any OSError                              → 500

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse,
    ok, created, bad_request, not_found, internal_error,
)


logger = logging.getLogger(__name__)

FILE_CONTENT_TYPE = "application/octet-stream"


class FileHandler:
    """
    Reads and writes files relative to a root directory.

    The root is fixed at construction and never changes; the same handler
    instance serves every connection thread.

    Usage:
        files = FileHandler("/srv/files")
        router.get("/files", strip="/files/")(files.read_file)
        router.post("/files/", strip="/files/")(files.write_file)
    """

    def __init__(self, root_dir: Union[str, Path]):
        # Not resolved: the join must behave exactly like root / name
        self.root_dir = Path(root_dir)

    def _target(self, request: HTTPRequest) -> Path:
        return self.root_dir / request.path_params.get("tail", "")

    def read_file(self, request: HTTPRequest) -> HTTPResponse:
        """
        Return the file's bytes, or 404 if it can't be read for any reason.
        """
        path = self._target(request)

        try:
            content = path.read_bytes()
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL byte in the path
            logger.debug(f"Cannot read {path}: {e}")
            return not_found()

        return ok(content, FILE_CONTENT_TYPE)

    def write_file(self, request: HTTPRequest) -> HTTPResponse:
        """
        Write the request body to the file, replacing any existing content.

        The write finishes before the status is chosen, so a 201 means the
        bytes are on disk.
        """
        if request.body is None:
            return bad_request()

        path = self._target(request)

        try:
            path.write_bytes(request.body.encode("utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to write file {path}: {e}")
            return internal_error()

        logger.debug(f"Wrote {len(request.body)} chars to {path}")
        return created()
