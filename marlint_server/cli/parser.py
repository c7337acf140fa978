"""Argument parser setup for the CLI application."""

import argparse

from marlint_server import __version__
from marlint_server.config.settings import config


def setup_argument_parser() -> argparse.ArgumentParser:
    default_log_level = config.logging.level
    parser = argparse.ArgumentParser(
        prog="marlint-server",
        description="Language server publishing marlint diagnostics",
    )

    transport = parser.add_mutually_exclusive_group()
    transport.add_argument(
        "--stdio",
        action="store_true",
        help="Communicate over stdin/stdout (default)",
    )
    transport.add_argument(
        "--tcp",
        action="store_true",
        help="Listen on a TCP socket instead of stdio",
    )
    parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind in TCP mode"
    )
    parser.add_argument(
        "--port", type=int, default=2087, help="Port to bind in TCP mode"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=default_log_level,
        help="Set the logging level",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser
