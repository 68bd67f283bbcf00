"""
Logging system for fluent-http.

Provides structured logging with multiple formats, handlers, and filters.

Example:
    >>> from fluent_http.core.logging import HTTPLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="colored")
    >>> logger = HTTPLogger(config)
    >>> logger.debug("Request dump", method="GET", url="https://api.com")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import HTTPLogger, DEFAULT_LOGGER_NAME
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "HTTPLogger",
    "DEFAULT_LOGGER_NAME",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
