"""Logging helpers shared by the protoc-bin-vendored and ci-gen CLIs.

Library modules obtain a module-level logger with ``get_logger(__name__)``.
Only the CLI entry points call ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAMES = ("protoc_bin_vendored", "ci_gen")

LOG_FORMAT = "%(levelname)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure log level and format for the package loggers.

    Level precedence: ``debug`` > ``quiet`` > ``verbose`` > default (WARNING).
    Logs go to stderr so that command output on stdout stays parseable.

    Args:
        debug: Enable DEBUG level with timestamps and logger names.
        verbose: Enable INFO level.
        quiet: Only show errors.
        stream: Stream for the handler (default: stderr).
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT if debug else LOG_FORMAT))

    for name in ROOT_LOGGER_NAMES:
        logger = logging.getLogger(name)
        # Replace handlers so repeated calls (tests, nested CLIs) don't duplicate output
        for existing in list(logger.handlers):
            logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
