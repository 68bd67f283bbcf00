"""
Structured value -> query parameters encoder.

Turns a mapping, dataclass, pydantic model or plain object into an ordered
list of ``(key, value)`` string pairs, suitable both for a URL query string
and for an ``application/x-www-form-urlencoded`` body.

Tagging convention for dataclass fields (``metadata={"url": ...}``):
    - ``"name"``             rename the key
    - ``"name,omitempty"``   rename and skip zero values
    - ``",omitempty"``       keep the field name, skip zero values
    - ``"-"``                never encode the field

Example:
    >>> @dataclass
    ... class Search:
    ...     query: str = field(metadata={"url": "q"})
    ...     show_all: bool = field(metadata={"url": "all"})
    ...     page: int = 1
    >>> encode_values(Search("foo", True, 2))
    [('all', 'true'), ('page', '2'), ('q', 'foo')]
"""

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Iterator, List, Mapping, Tuple

Pair = Tuple[str, str]


class QueryEncodingError(ValueError):
    """The value has a shape that cannot become key/value pairs."""


def encode_values(value: Any) -> List[Pair]:
    """
    Encode ``value`` to query pairs, sorted by key.

    Pairs sharing a key keep their relative order, so sequence values are
    emitted in sequence order.

    Raises:
        QueryEncodingError: value is not a mapping, dataclass, model or object
    """
    if value is None:
        raise QueryEncodingError("cannot encode None as query values")

    pairs = list(_encode_struct(value, prefix=""))
    # sort() is stable: values of one key stay in insertion order
    pairs.sort(key=lambda pair: pair[0])
    return pairs


def _fields(value: Any) -> Iterator[Tuple[str, Any, bool]]:
    """Yield (key, field value, omitempty) for every encodable field."""
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield str(key), item, False
        return

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            tag = f.metadata.get("url", "")
            if tag == "-":
                continue
            name, _, options = tag.partition(",")
            yield name or f.name, getattr(value, f.name), "omitempty" in options.split(",")
        return

    # pydantic v2 models
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump) and not isinstance(value, type):
        for key, item in model_dump(by_alias=True).items():
            yield key, item, False
        return

    if _is_scalar(value) or isinstance(value, (list, tuple, set, frozenset, bytes)):
        raise QueryEncodingError(
            f"expected a mapping, dataclass or object, got {type(value).__name__}"
        )

    attrs = getattr(value, "__dict__", None)
    if attrs is None:
        raise QueryEncodingError(f"cannot encode {type(value).__name__} as query values")

    for key, item in attrs.items():
        if not key.startswith("_"):
            yield key, item, False


def _encode_struct(value: Any, prefix: str) -> Iterator[Pair]:
    for name, item, omitempty in _fields(value):
        if omitempty and _is_empty(item):
            continue
        key = f"{prefix}[{name}]" if prefix else name
        yield from _encode_item(key, item)


def _encode_item(key: str, item: Any) -> Iterator[Pair]:
    if _is_scalar(item):
        yield key, _format_scalar(item)
    elif isinstance(item, (list, tuple, set, frozenset)):
        elements: Iterable[Any] = sorted(item, key=str) if isinstance(item, (set, frozenset)) else item
        for element in elements:
            if not _is_scalar(element):
                raise QueryEncodingError(f"nested value in sequence {key!r} is not supported")
            yield key, _format_scalar(element)
    else:
        yield from _encode_struct(item, prefix=key)


def _is_scalar(item: Any) -> bool:
    return item is None or isinstance(item, (str, bool, int, float, Enum, date, bytes))


def _format_scalar(item: Any) -> str:
    if item is None:
        return ""
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, Enum):
        return _format_scalar(item.value)
    if isinstance(item, (datetime, date)):
        return item.isoformat()
    if isinstance(item, bytes):
        return item.decode("utf-8", errors="replace")
    return str(item)


def _is_empty(item: Any) -> bool:
    if item is None or item is False:
        return True
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return item == 0
    if isinstance(item, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(item) == 0
    return False
