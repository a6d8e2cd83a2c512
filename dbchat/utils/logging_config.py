"""Loguru sink setup shared by the command-line and web entry points."""

import os
import sys

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def configure_logging(level: str | None = None) -> None:
    """
    Replace loguru's default sink with a single stderr sink.

    Args:
        level: Minimum level; falls back to LOG_LEVEL or INFO

    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
    )
