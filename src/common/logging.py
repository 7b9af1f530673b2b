"""Logging configuration for the SEO blog engine.

Every module gets its own named logger writing to stdout. The default
level comes from BLOG_ENGINE_LOG_LEVEL (e.g. DEBUG to see per-section
render sizes and image lookups).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "BLOG_ENGINE_LOG_LEVEL"


def default_level() -> int:
    """Level named by BLOG_ENGINE_LOG_LEVEL, or INFO when unset or unknown."""
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    level: Optional[int] = None,
    module_name: str = "blog_engine",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure and return a named logger.

    Calling again with the same name returns the existing logger untouched.

    Args:
        level: Logging level (defaults to default_level()).
        module_name: Name for the logger instance.
        stream: Output stream (defaults to stdout).

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        return logger

    level = default_level() if level is None else level
    logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
