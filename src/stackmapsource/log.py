"""Logging helper module."""

import sys
from logging import (
    DEBUG,
    WARNING,
    Logger,
    basicConfig,
    getLogger,
)

from stackmapsource.args import Args

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def init_logging(args: Args) -> None:
    """Initialize logging for the application.

    Should be called once when the application starts. Stdout carries the
    translated trace, so all diagnostics go to stderr.
    """
    basicConfig(
        level=WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )

    if args.verbose:
        root_logger = getLogger()
        root_logger.setLevel(DEBUG)
        root_logger.debug("Debug logging enabled.")


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)

