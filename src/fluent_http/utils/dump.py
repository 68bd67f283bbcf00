"""
Human-readable dumps of requests and responses for debug mode.

The output follows the HTTP/1.1 wire layout (start line, headers, blank line,
body). Header order and case follow requests' own structures, so some details
of what actually went over the socket may differ.
"""

from typing import Mapping, Optional, Union
from urllib.parse import urlsplit

import requests

from .sanitizer import mask_headers, mask_url

# Bodies larger than this are truncated in the dump
MAX_DUMP_BODY = 64 * 1024


def _format_body(body: Optional[Union[bytes, str]], content_type: str = "") -> str:
    if body is None or body == b"" or body == "":
        return ""
    if isinstance(body, str):
        text = body
    elif not isinstance(body, (bytes, bytearray)):
        # streamed body (file object / generator): not consumed for the dump
        return f"<streamed body: {type(body).__name__}>"
    elif content_type.startswith("multipart/") or not _looks_textual(body):
        return f"<{len(body)} bytes of binary data>"
    else:
        text = bytes(body).decode("utf-8", errors="replace")

    if len(text) > MAX_DUMP_BODY:
        return text[:MAX_DUMP_BODY] + f"\n... <truncated, {len(text)} chars total>"
    return text


def _looks_textual(data: bytes) -> bool:
    try:
        data[:1024].decode("utf-8")
    except UnicodeDecodeError:
        return False
    return b"\x00" not in data[:1024]


def _format_headers(headers: Mapping[str, str]) -> str:
    return "".join(f"{key}: {value}\r\n" for key, value in mask_headers(headers).items())


def dump_request(request: requests.PreparedRequest) -> str:
    """
    Dump an outbound request.

    Example:
        >>> print(dump_request(prepared))
        POST /users?page=2 HTTP/1.1
        Host: api.example.com
        Content-Type: application/json
        Content-Length: 17

        {"name": "alice"}
    """
    parts = urlsplit(request.url or "")
    target = parts.path or "/"
    if parts.query:
        target += "?" + parts.query

    lines = f"{request.method} {mask_url(target)} HTTP/1.1\r\n"
    if parts.netloc and "Host" not in request.headers:
        lines += f"Host: {parts.hostname}{':' + str(parts.port) if parts.port else ''}\r\n"
    lines += _format_headers(request.headers)
    lines += "\r\n"
    lines += _format_body(request.body, request.headers.get("Content-Type", ""))
    return lines


def dump_response(response: requests.Response) -> str:
    """
    Dump a received response.

    Reads ``response.content``, which buffers the body inside the response,
    so extraction afterwards still sees the full body.
    """
    reason = response.reason or ""
    lines = f"HTTP/1.1 {response.status_code} {reason}".rstrip() + "\r\n"
    lines += _format_headers(response.headers)
    lines += "\r\n"
    lines += _format_body(response.content, response.headers.get("Content-Type", ""))
    return lines
