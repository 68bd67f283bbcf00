"""
Logger used by the executor as its diagnostic sink.

Wraps a stdlib logger and accepts structured fields as keyword arguments.
"""

import logging
from typing import Optional, Any

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "fluent_http"


class HTTPLogger:
    """
    Structured logger for fluent-http.

    With a LoggingConfig the underlying logger gets its own handlers and stops
    propagating. Without one nothing is attached: records propagate to the
    ``fluent_http`` logger (which only has a NullHandler) and the application
    decides where they go.

    Example:
        >>> logger = HTTPLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.debug("Request dump", method="GET", dump="GET / HTTP/1.1")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        self.config = config
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)

        if config is None:
            return

        level = self._get_level(config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters = []
        if config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        formatter = get_formatter(config.format.value)

        if config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if config.enable_file and config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=config.max_bytes,
                backup_count=config.backup_count,
                filters=filters
            ))

    def _get_level(self, level: LogLevel) -> int:
        return getattr(logging, level.value)

    def is_enabled_for(self, level: int) -> bool:
        """Check the effective level before building an expensive message."""
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, fields: dict) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(fields))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """
        Log warning message.

        Example:
            >>> logger.warning("Request error (will retry)", attempt=1, max_attempts=3)
        """
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def close(self) -> None:
        """
        Flush and close the handlers this logger installed.

        Idempotent. A logger created without config owns no handlers and
        leaves the shared ``fluent_http`` logger untouched.
        """
        if self._closed:
            return
        self._closed = True

        if self.config is None:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                pass
            self._logger.removeHandler(handler)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
