"""Logging for the spending tracker.

The Streamlit page and the import CLI call ``configure_logging`` once per
process; Streamlit re-executes the page script on every interaction, so
repeat calls only adjust the level. Other modules ask ``get_logger`` for a
child of the ``spending_tracker`` logger and never attach handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

LOGGER_NAME = "spending_tracker"
LEVEL_ENV = "SPENDING_TRACKER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_level(name: Optional[str] = None) -> int:
    """``--log-level`` first, then ``SPENDING_TRACKER_LOG_LEVEL``, then INFO."""
    name = (name or os.getenv(LEVEL_ENV) or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, stream: Optional[IO[str]] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return logger

    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    # Streamlit installs its own root handlers.
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
