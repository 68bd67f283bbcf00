"""fluent-http - chainable HTTP request builder on top of requests."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.client import HTTPClient
from .core.config import ClientConfig, DEFAULT_TIMEOUT
from .core.executor import Executor
from .core.response import Response
from .core.logging import LoggingConfig
from .core.exceptions import (
    FluentHTTPError,
    InvalidConfigurationError,
    EncodingError,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    SSLError,
    ResponseError,
    ReadError,
    DecodeError,
)
from .api import (
    get,
    head,
    delete,
    options,
    post,
    put,
    patch,
    get_default_client,
    set_default_client,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('fluent_http')
logging.getLogger('fluent_http').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("fluent-http-client")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

# All public exports
__all__ = [
    # Core
    "HTTPClient",
    "Executor",
    "Response",

    # Config
    "ClientConfig",
    "LoggingConfig",
    "DEFAULT_TIMEOUT",

    # Exceptions
    "FluentHTTPError",
    "InvalidConfigurationError",
    "EncodingError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "SSLError",
    "ResponseError",
    "ReadError",
    "DecodeError",

    # Shortcuts
    "get",
    "head",
    "delete",
    "options",
    "post",
    "put",
    "patch",
    "get_default_client",
    "set_default_client",

    # Version
    "__version__",
]
