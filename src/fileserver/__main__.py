"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on 127.0.0.1:4221
    python -m fileserver

    # Serve (and store uploads in) another directory
    python -m fileserver --directory /tmp/files

The same entry point is installed as the `fileserver` console script.

Exit status:
    0   stopped with Ctrl+C
    1   the listening socket could not be bound
    2   bad command line (argparse)

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import FileServer
from .config import ServerConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal HTTP/1.1 file server built on raw sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                        # Serve the current directory
  python -m fileserver --directory /tmp/files # Serve /tmp/files
        """
    )

    parser.add_argument(
        "--directory", "-d",
        default=".",
        help="Directory to serve files from and store uploads in (default: .)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"fileserver {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Argument list, defaults to sys.argv[1:].

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    config = ServerConfig(directory=args.directory)
    server = FileServer(config)

    # Blocks until Ctrl+C
    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
