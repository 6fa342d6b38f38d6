"""Command-line interface for eslint-actions."""

from __future__ import annotations

import argparse
import dataclasses
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

from eslint_actions.config import OffsetEncoding, Settings
from eslint_actions.logging import configure_logging, get_logger
from eslint_actions.lsp.server import create_server


@dataclasses.dataclass(frozen=True)
class CliArgs:
    """Parsed command-line arguments."""

    transport: Literal["stdio", "tcp"]
    host: str
    port: int
    log_level: str
    log_file: Path | None
    debug: bool
    eslint_bin: str
    disable_comments: bool
    offset_encoding: OffsetEncoding


def parse_args(argv: Sequence[str] | None = None) -> CliArgs:
    """
    Parse command-line arguments.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Parsed arguments as CliArgs dataclass.
    """
    parser = argparse.ArgumentParser(
        prog="eslint-actions",
        description="Language server offering ESLint fixes as code actions",
    )

    parser.add_argument(
        "--transport",
        choices=["stdio", "tcp"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for TCP transport (default: 127.0.0.1)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=4390,
        help="Port for TCP transport (default: 4390)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (default: INFO, or DEBUG if --debug is set)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Log file path (default: stderr)",
    )

    parser.add_argument(
        "-v",
        "--debug",
        action="store_true",
        help="Enable debug mode (sets log level to DEBUG unless --log-level is specified)",
    )

    parser.add_argument(
        "--eslint-bin",
        default="eslint",
        help="ESLint executable (default: eslint)",
    )

    parser.add_argument(
        "--no-disable-comments",
        dest="disable_comments",
        action="store_false",
        help="Do not offer actions that insert eslint-disable comments",
    )

    parser.add_argument(
        "--offset-encoding",
        choices=["utf-8", "utf-16"],
        default="utf-8",
        help="Unit of ESLint fix offsets (default: utf-8)",
    )

    args = parser.parse_args(argv)

    # Explicit --log-level wins, otherwise --debug sets DEBUG
    if args.log_level is not None:
        log_level = args.log_level
    elif args.debug:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    return CliArgs(
        transport=args.transport,
        host=args.host,
        port=args.port,
        log_level=log_level,
        log_file=args.log_file,
        debug=args.debug,
        eslint_bin=args.eslint_bin,
        disable_comments=args.disable_comments,
        offset_encoding=args.offset_encoding,
    )


def settings_from_args(args: CliArgs) -> Settings:
    """Build linter settings from parsed arguments."""
    return Settings(
        eslint_bin=args.eslint_bin,
        eslint_enable_disable_comments=args.disable_comments,
        offset_encoding=args.offset_encoding,
    )


def run(argv: Sequence[str] | None = None) -> int:
    """
    Run the LSP server.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success, 1 for error).
    """
    args = parse_args(argv)

    configure_logging(level=args.log_level, log_file=args.log_file)
    logger = get_logger("main")

    logger.info("Starting eslint-actions server")
    logger.debug("Configuration: %s", args)

    try:
        server = create_server(settings=settings_from_args(args))

        if args.transport == "stdio":
            logger.info("Starting in stdio mode")
            server.start_io()
        else:
            logger.info("Starting in TCP mode on %s:%d", args.host, args.port)
            server.start_tcp(args.host, args.port)

        return 0

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0

    except Exception:
        logger.critical("Fatal error in server", exc_info=True)
        return 1
