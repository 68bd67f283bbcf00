"""
Response wrapper with typed body extraction.
"""

import json
from functools import lru_cache
from typing import Any, Callable, Optional, Type, TypeVar, Union, get_origin

import requests
from pydantic import TypeAdapter
from pydantic.errors import PydanticSchemaGenerationError

from .exceptions import ReadError, DecodeError

T = TypeVar("T")


class Response:
    """
    Thin wrapper over ``requests.Response``.

    The main job is parsing the body for the caller: ``as_string()``,
    ``as_bytes()`` and ``as_json()``. The body is read from the connection
    once and buffered, so calling more than one of them (or enabling debug
    dumps) is safe.

    Non-2xx statuses are ordinary responses here; check ``status_code``.

    Example:
        >>> resp = HTTPClient().url("https://api.github.com").path("repos/psf/requests").get()
        >>> repo = resp.as_json(Repo)
        >>> print(repo.name)
    """

    def __init__(self, response: requests.Response):
        self.raw = response

    # ==================== Extraction ====================

    def as_bytes(self) -> bytes:
        """
        Return the whole body as bytes.

        Raises:
            ReadError: the body could not be fully read
        """
        try:
            content = self.raw.content
        except (
            requests.exceptions.ChunkedEncodingError,
            requests.exceptions.ContentDecodingError,
            requests.exceptions.ConnectionError,
            requests.exceptions.StreamConsumedError,
            OSError,
            RuntimeError,
        ) as e:
            raise ReadError(f"Failed to read response body: {e}", self.url) from e
        return content or b""

    def as_string(self) -> str:
        """
        Return the whole body as text.

        Uses the charset of the Content-Type header, UTF-8 when absent.

        Raises:
            ReadError: the body could not be fully read
        """
        data = self.as_bytes()
        encoding = _charset(self.raw.headers.get("Content-Type", "")) or "utf-8"
        try:
            return data.decode(encoding, errors="replace")
        except LookupError:
            return data.decode("utf-8", errors="replace")

    def as_json(self, target: Optional[Union[Type[T], Callable[[Any], T]]] = None) -> Any:
        """
        Decode the body as JSON.

        Args:
            target: Shape to decode into. None returns plain dict/list values;
                a type (dataclass, pydantic model, ``List[Item]``, ...) is
                validated with pydantic, nested dataclasses included; any
                other callable gets the decoded value.

        Raises:
            ReadError: the body could not be fully read
            DecodeError: the body is not JSON, or not of the target's shape

        Example:
            >>> user = resp.as_json(User)
            >>> user.name
            'cizixs'
        """
        data = self.as_bytes()
        try:
            value = json.loads(data)
        except ValueError as e:
            raise DecodeError(f"Response body is not valid JSON: {e}", self.url) from e

        if target is None:
            return value

        try:
            if isinstance(target, type) or get_origin(target) is not None:
                return _adapter(target).validate_python(value)
            return target(value)
        except PydanticSchemaGenerationError:
            # A class pydantic cannot describe gets the decoded value as is
            return _construct(target, value, self.url)
        except (TypeError, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            raise DecodeError(
                f"Cannot decode JSON into {getattr(target, '__name__', target)!r}: {e}",
                self.url
            ) from e

    # ==================== Свойства ====================

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def headers(self):
        """Response headers (case-insensitive mapping)."""
        return self.raw.headers

    @property
    def url(self) -> Optional[str]:
        """Final URL, after redirects."""
        return self.raw.url

    @property
    def reason(self) -> Optional[str]:
        return self.raw.reason

    @property
    def cookies(self):
        return self.raw.cookies

    @property
    def ok(self) -> bool:
        """True for status codes below 400."""
        return self.raw.ok

    # ==================== Управление жизненным циклом ====================

    def close(self) -> None:
        """Release the connection back to the transport."""
        self.raw.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"


def _charset(content_type: str) -> Optional[str]:
    """Explicit charset parameter of a Content-Type value, if any."""
    for param in content_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.strip().lower() == "charset" and value:
            return value.strip().strip('"\'')
    return None


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _construct(target: Callable[[Any], T], value: Any, url: Optional[str]) -> T:
    try:
        return target(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            f"Cannot decode JSON into {getattr(target, '__name__', target)!r}: {e}",
            url
        ) from e
