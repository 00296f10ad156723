"""Logging setup shared by the API lifespan and scripts."""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", format_string: str | None = None) -> None:
    """Configure root logging to stdout.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        format_string: Custom format string (uses DEFAULT_FORMAT if None).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )