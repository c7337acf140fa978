"""Main entry point for the marlint language server."""

import sys
from typing import List, Optional

from loguru import logger

from marlint_server import __version__
from marlint_server.services.lsp import create_server
from marlint_server.utils.console import console
from marlint_server.utils.logging import setup_logging

from .parser import setup_argument_parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    server = create_server()

    try:
        if args.tcp:
            console.process(
                f"Starting marlint-server {__version__} on {args.host}:{args.port}"
            )
            server.start_tcp(args.host, args.port)
        else:
            logger.info(f"Starting marlint-server {__version__} over stdio")
            server.start_io()
    except KeyboardInterrupt:
        console.info("Server stopped by user")
    except Exception as e:
        logger.exception(f"Server crashed: {e}")
        console.error(f"marlint-server stopped: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
