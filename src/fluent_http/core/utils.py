"""
URL helpers for request resolution.

Includes:
- path segment joining / cleaning
- query string merging
- proxy / base URL validation
"""

from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit, SplitResult

from .exceptions import InvalidConfigurationError


def clean_path(path: str) -> str:
    """
    Lexically clean a slash-separated path.

    Collapses repeated slashes, drops ``.`` segments, resolves ``..`` and
    removes the trailing slash. A rooted path stays rooted.

    Examples:
        >>> clean_path("/users//cizixs/")
        '/users/cizixs'
        >>> clean_path("users/./a/../b")
        'users/b'
        >>> clean_path("")
        ''
    """
    rooted = path.startswith("/")
    segments: List[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments and segments[-1] != "..":
                segments.pop()
            elif not rooted:
                segments.append(segment)
            continue
        segments.append(segment)

    cleaned = "/".join(segments)
    if rooted:
        return "/" + cleaned
    return cleaned


def join_path(*parts: str) -> str:
    """
    Join path parts with exactly one ``/`` between non-empty parts.

    Empty parts are ignored; the result is cleaned with :func:`clean_path`.

    Examples:
        >>> join_path("users", "/cizixs/")
        'users/cizixs'
        >>> join_path("/api/v1/", "users")
        '/api/v1/users'
    """
    non_empty = [part for part in parts if part]
    if not non_empty:
        return ""
    return clean_path("/".join(non_empty))


def merge_query(
    url: SplitResult,
    simple: Dict[str, str],
    structured: Iterable[Iterable[Tuple[str, str]]],
) -> str:
    """
    Build the final query string.

    Existing query of the URL, then the simple map, then every structured
    value in order are added into one multi-map; nothing is overwritten.
    Keys are sorted in the encoded output, values of one key keep the
    order they were added in.
    """
    values: Dict[str, List[str]] = {}
    for key, value in parse_qsl(url.query, keep_blank_values=True):
        values.setdefault(key, []).append(value)
    for key, value in simple.items():
        values.setdefault(key, []).append(value)
    for pairs in structured:
        for key, value in pairs:
            values.setdefault(key, []).append(value)

    return urlencode(
        [(key, value) for key in sorted(values) for value in values[key]]
    )


def split_base_url(url: Optional[str]) -> SplitResult:
    """
    Parse and validate the base URL of a request.

    Raises:
        InvalidConfigurationError: empty URL, missing scheme/host or bad port
    """
    if not url:
        raise InvalidConfigurationError("No URL configured for request")

    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidConfigurationError(f"Malformed URL {url!r}: {e}") from e

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidConfigurationError(
            f"Malformed URL {url!r}: expected http(s)://host[/path]"
        )
    return parts


def validate_proxy_url(proxy: str) -> str:
    """
    Check that a proxy URL can be used by the transport.

    Raises:
        InvalidConfigurationError: no scheme, no host or bad port
    """
    try:
        parts = urlsplit(proxy)
        parts.port
    except ValueError as e:
        raise InvalidConfigurationError(f"Malformed proxy URL {proxy!r}: {e}") from e

    if not parts.scheme or not parts.hostname:
        raise InvalidConfigurationError(
            f"Malformed proxy URL {proxy!r}: expected scheme://host[:port]"
        )
    return proxy


def with_path_and_query(url: SplitResult, path: str, query: str) -> str:
    """Rebuild a URL string with a new path and query, keeping the fragment."""
    return urlunsplit((url.scheme, url.netloc, path, query, url.fragment))
