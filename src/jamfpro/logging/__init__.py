"""
Structured logging module.

Provides JSON and console logging with request-scoped context propagation.
"""

from jamfpro.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from jamfpro.logging.context_managers import LogContext
from jamfpro.logging.formatters import ConsoleFormatter, JSONFormatter
from jamfpro.logging.setup import get_logger, setup_logging

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    "LogContext",
]
