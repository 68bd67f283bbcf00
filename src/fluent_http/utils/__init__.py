"""Utility modules for fluent-http."""

from .sanitizer import (
    mask_sensitive_data,
    mask_url,
    mask_headers,
)
from .querystring import encode_values, QueryEncodingError
from .dump import dump_request, dump_response

__all__ = [
    'mask_sensitive_data',
    'mask_url',
    'mask_headers',
    'encode_values',
    'QueryEncodingError',
    'dump_request',
    'dump_response',
]
