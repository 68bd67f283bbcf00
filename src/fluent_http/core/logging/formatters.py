"""
Log formatters for different output formats.

Provides JSON, text, and colored formatters. Extra fields passed to
HTTPLogger end up as record attributes and are appended by every formatter.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List

# Attributes every LogRecord has; anything else came in through ``extra``.
_STANDARD_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'taskName',
})

_TEXT_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_FIELDS and not key.startswith('_')
    }


def _append_extra(base_msg: str, record: logging.LogRecord) -> str:
    pairs: List[str] = [f"{key}={value}" for key, value in _extra_fields(record).items()]
    if pairs:
        base_msg += " " + " ".join(pairs)
    return base_msg


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123Z", "level": "DEBUG",
         "logger": "fluent_http", "message": "Request dump",
         "method": "GET", "url": "https://api.com", "dump": "GET / HTTP/1.1..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Plain text formatter.

    Format: [timestamp] [level] [logger] message [extra_fields]
    """

    def __init__(self):
        super().__init__(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        return _append_extra(super().format(record), record)


class ColoredFormatter(logging.Formatter):
    """
    Colored text formatter for terminal output.

    Level names are wrapped in ANSI colors: DEBUG cyan, INFO green,
    WARNING yellow, ERROR red, CRITICAL bold red.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
        'RESET': '\033[0m'
    }

    def __init__(self):
        super().__init__(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            base_msg = super().format(record)
        finally:
            record.levelname = levelname

        return _append_extra(base_msg, record)


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Get formatter by type.

    Raises:
        ValueError: If format_type is unknown

    Example:
        >>> formatter = get_formatter("json")
    """
    formatters = {
        "json": JSONFormatter,
        "text": TextFormatter,
        "colored": ColoredFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(
            f"Unknown format type: {format_type}. "
            f"Available: {', '.join(formatters.keys())}"
        )

    return formatter_class()
