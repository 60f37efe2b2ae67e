"""Logging configuration for tagnorm."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

PACKAGE_LOGGER = "tagnorm"


def configure_logging(verbose: bool = False, quiet: bool = False, stream: TextIO | None = None) -> None:
    """Configure the tagnorm package logger.

    Log output goes to stderr by default so JSON on stdout stays clean.
    Verbose output names the emitting module.
    """
    if verbose:
        level = logging.DEBUG
        fmt = "%(levelname)s %(name)s: %(message)s"
    elif quiet:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.INFO
        fmt = "%(message)s"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
