"""Logging configuration for eslint-actions."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER_NAME = "eslint_actions"


def configure_logging(*, level: str = "INFO", log_file: Path | None = None) -> None:
    """
    Configure logging for eslint-actions.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Reconfiguring replaces the previous handler
    logger.handlers.clear()

    # stdout carries the LSP stream in stdio mode
    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    logger.addHandler(handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name under the eslint_actions namespace.

    Args:
        name: Logger name (will be prefixed with 'eslint_actions.').

    Returns:
        Logger instance.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
