"""
Package-level shortcuts.

    >>> import fluent_http
    >>> fluent_http.get("https://httpbin.org/get").as_json()

All shortcuts go through one process-wide builder (``default_client``). It is
shared mutable state: every call adds to the same configuration (a
``post(url, data)`` leaves its body on the builder, a URL argument replaces
the base URL). Do not use the shortcuts from several threads at once; build a
per-call ``HTTPClient`` instead.
"""

import threading
from typing import Any, Optional

from .core.client import HTTPClient
from .core.config import ClientConfig
from .core.response import Response

_lock = threading.Lock()
default_client: Optional[HTTPClient] = None


def get_default_client() -> HTTPClient:
    """Return the shared builder, creating it from the environment on first use."""
    global default_client
    with _lock:
        if default_client is None:
            default_client = HTTPClient(ClientConfig.from_env())
        return default_client


def set_default_client(client: Optional[HTTPClient]) -> None:
    """Replace the shared builder; None makes the next call create a fresh one."""
    global default_client
    with _lock:
        default_client = client


def get(url: str) -> Response:
    return get_default_client().get(url)


def head(url: str) -> Response:
    return get_default_client().head(url)


def delete(url: str) -> Response:
    return get_default_client().delete(url)


def options(url: str) -> Response:
    return get_default_client().options(url)


def post(url: str, data: Any = None) -> Response:
    """POST ``data`` (file object, bytes or str) as a raw body."""
    return get_default_client().body(data).post(url)


def put(url: str, data: Any = None) -> Response:
    """PUT ``data`` (file object, bytes or str) as a raw body."""
    return get_default_client().body(data).put(url)


def patch(url: str, data: Any = None) -> Response:
    """PATCH ``data`` (file object, bytes or str) as a raw body."""
    return get_default_client().body(data).patch(url)
