"""Logging configuration for Valet.

Diagnostics go to stderr so schema output and command messages on
stdout stay clean. Third-party HTTP libraries are held at WARNING.
"""

import logging
import sys
from typing import Literal

# Loggers of libraries used for chart downloads
NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "urllib3",
    "asyncio",
]

APP_LOGGER = "valet"

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
DEBUG_FORMAT = "%(asctime)s %(levelname)s | %(name)s | %(message)s"


def suppress_noisy_loggers() -> None:
    """Hold third-party loggers at WARNING and drop their handlers."""
    for logger_name in NOISY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.handlers.clear()


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
) -> None:
    """Configure application logging.

    Replaces any root handlers with a single stderr handler. At DEBUG
    the format adds timestamps and logger names.

    Args:
        level: Log level (defaults to settings.effective_log_level)
    """
    if level is None:
        from valet.settings import get_settings

        level = get_settings().effective_log_level
    numeric = getattr(logging, level)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric)
    if numeric <= logging.DEBUG:
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt="%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger(APP_LOGGER).setLevel(numeric)
    suppress_noisy_loggers()
