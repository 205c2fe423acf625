"""Loguru sink setup for applications embedding the client."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(
    level: str = "INFO", sink: TextIO | Any = sys.stderr, fmt: str = DEFAULT_FORMAT
) -> int:
    """Replace loguru's default sink and return the new handler id."""
    logger.remove()
    return logger.add(sink, level=level.upper(), format=fmt)
