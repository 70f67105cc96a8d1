"""Logging setup and configuration."""

import logging
import sys

from jamfpro.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_LEVEL = logging.INFO
LIBRARY_LOGGER = "jamfpro"

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "aiohttp.access",
    "aiohttp.client",
]


def setup_logging(
    level: int | str = DEFAULT_LEVEL,
    json_format: bool = False,
    stream=None,
) -> logging.Logger:
    """
    Configure the library logger.

    Args:
        level: Log level for the jamfpro logger
        json_format: Emit one JSON object per line instead of console text
        stream: Output stream (defaults to stderr)

    Returns:
        The configured jamfpro logger

    Calling this twice replaces the handler it installed the first time
    instead of stacking another one.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(LIBRARY_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_jamfpro_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())
    handler._jamfpro_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
