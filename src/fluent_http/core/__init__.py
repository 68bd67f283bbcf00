"""Core fluent-http модули."""

from .config import ClientConfig, DEFAULT_TIMEOUT
from .body import (
    EmptyBody,
    RawBody,
    JSONBody,
    FormBody,
    MultipartBody,
    FilePart,
)
from .exceptions import (
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
    classify_requests_exception,
)
from .client import HTTPClient
from .executor import Executor
from .response import Response

__all__ = [
    # Config
    "ClientConfig",
    "DEFAULT_TIMEOUT",
    # Body
    "EmptyBody",
    "RawBody",
    "JSONBody",
    "FormBody",
    "MultipartBody",
    "FilePart",
    # Core
    "HTTPClient",
    "Executor",
    "Response",
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
    "classify_requests_exception",
]
