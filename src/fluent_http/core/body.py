"""
Request body variants.

A builder holds exactly one body at a time; every body setter replaces it,
so the last call wins:

    EmptyBody | RawBody(stream) | JSONBody(text or payload)
              | FormBody(value) | MultipartBody(parts)

Each variant is turned into ``(data, content_type)`` by ``encode()`` during
request resolution. Encoding failures raise EncodingError before any
network I/O happens.
"""

import dataclasses
import io
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union
from urllib.parse import urlencode

from urllib3.filepost import encode_multipart_formdata

from .config import JSON_CONTENT_TYPE, FORM_CONTENT_TYPE
from .exceptions import EncodingError
from ..utils.querystring import QueryEncodingError, encode_values

# What requests accepts as ``data`` for a prepared request
BodyData = Union[bytes, str, io.IOBase, Any, None]

# Sources accepted for a file part
FileSource = Union[str, bytes, bytearray, Path, io.IOBase, Any]


@dataclass(frozen=True)
class EncodedBody:
    """Result of resolving a body variant."""
    data: BodyData = None
    content_type: Optional[str] = None


class EmptyBody:
    """No body."""

    def encode(self) -> EncodedBody:
        return EncodedBody()

    def __repr__(self) -> str:
        return "EmptyBody()"


@dataclass
class RawBody:
    """
    Caller supplied bytes/str/stream, sent as-is.

    Content-Type is the caller's responsibility. A stream is read once by
    the transport; it cannot be replayed on retry.
    """
    stream: BodyData

    def encode(self) -> EncodedBody:
        data = self.stream
        if isinstance(data, str):
            data = data.encode("utf-8")
        return EncodedBody(data=data)


@dataclass
class JSONBody:
    """
    JSON body: either literal text (sent verbatim) or a payload encoded at
    resolution time. Dataclass payloads are converted with ``asdict``,
    pydantic models with ``model_dump``.
    """
    text: Optional[str] = None
    payload: Any = None

    def encode(self) -> EncodedBody:
        if self.text is not None:
            return EncodedBody(data=self.text.encode("utf-8"), content_type=JSON_CONTENT_TYPE)

        try:
            data = json.dumps(_to_jsonable(self.payload)).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodingError(f"JSON encoding failed: {e}") from e
        return EncodedBody(data=data, content_type=JSON_CONTENT_TYPE)


@dataclass
class FormBody:
    """application/x-www-form-urlencoded body built from a structured value."""
    value: Any

    def encode(self) -> EncodedBody:
        try:
            pairs = encode_values(self.value)
        except QueryEncodingError as e:
            raise EncodingError(f"Form encoding failed: {e}") from e
        return EncodedBody(data=urlencode(pairs), content_type=FORM_CONTENT_TYPE)


@dataclass
class FilePart:
    """One multipart part: form field name, filename and content source."""
    field_name: str
    filename: str
    source: FileSource

    def read(self) -> bytes:
        """
        Read the whole source.

        Raises:
            EncodingError: source is unreadable or of an unsupported type
        """
        source = self.source
        try:
            if isinstance(source, (bytes, bytearray)):
                return bytes(source)
            if isinstance(source, str):
                return source.encode("utf-8")
            if isinstance(source, Path):
                return source.read_bytes()
            read = getattr(source, "read", None)
            if callable(read):
                data = read()
                return data.encode("utf-8") if isinstance(data, str) else bytes(data)
        except (OSError, ValueError, TypeError) as e:
            raise EncodingError(
                f"Cannot read file part {self.field_name!r} ({self.filename!r}): {e}"
            ) from e

        raise EncodingError(
            f"Unsupported file source for part {self.field_name!r}: {type(source).__name__}"
        )


@dataclass
class MultipartBody:
    """
    multipart/form-data body over a list of file parts.

    ``parts`` is the builder's own list object, so parts appended after this
    variant was selected are still encoded.
    """
    parts: List[FilePart] = field(default_factory=list)

    def encode(self) -> EncodedBody:
        fields: List[Tuple[str, Tuple[str, bytes]]] = [
            (part.field_name, (part.filename, part.read())) for part in self.parts
        ]
        try:
            data, content_type = encode_multipart_formdata(fields)
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Multipart encoding failed: {e}") from e
        return EncodedBody(data=data, content_type=content_type)


Body = Union[EmptyBody, RawBody, JSONBody, FormBody, MultipartBody]


def default_filename(source: FileSource) -> str:
    """
    Guess a filename for a part when the caller gave none.

    Uses the basename of a path source or the ``name`` of a file object.
    """
    if isinstance(source, Path):
        return source.name
    name = getattr(source, "name", None)
    if isinstance(name, str) and name:
        return os.path.basename(name)
    return "file"


def _to_jsonable(payload: Any) -> Any:
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return dataclasses.asdict(payload)
    model_dump = getattr(payload, "model_dump", None)
    if callable(model_dump) and not isinstance(payload, type):
        return model_dump(mode="json")
    return payload
