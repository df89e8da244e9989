"""Vendor header objects.

Callers can pass header parameters as HTTP headers named after the
configured vendor. Each header object becomes one JSON document,
keyed by the object name with its first letter lower-cased:

- ``X-<vendor>-<Object>: key=value;key=value`` supplies several fields
- ``X-<vendor>-<Object>-<Property>: value`` supplies one field, named
  after the property with its first letter lower-cased

Header names are matched case-insensitively.

Example:
    >>> process_vendor_headers(
    ...     {"X-Acme-Session": "user=alice;locale=en", "X-Acme-Session-Token": "abc"},
    ...     "Acme",
    ... )
    {'session': '{"user":"alice","locale":"en","token":"abc"}'}
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from pydantic_core import to_json

from ..errors import BadRequestError
from ..logging import log_debug

VALID_HEADER_FORMAT = re.compile(r"((:?\w+)=(\w+)(;|$))+")


def lower_first(text: str) -> str:
    """Lower-case the first character, leaving the rest untouched."""
    if not text or not text.strip():
        return text
    return text[0].lower() + text[1:]


def process_vendor_headers(
    headers: Mapping[str, str] | None,
    vendor: str | None,
) -> dict[str, str]:
    """Fold vendor headers into header parameters.

    Args:
        headers: Request headers.
        vendor: Vendor name; None disables header parameters.

    Returns:
        Header parameter name to JSON object text.

    Raises:
        BadRequestError: If an object header is not ``key=value`` pairs.
    """
    if not vendor or not headers:
        return {}

    object_pattern = re.compile(rf"(X-{re.escape(vendor)}-\w+)(-\w+)?", re.IGNORECASE)

    # Lower-cased object header name to the first spelling seen
    object_headers: dict[str, str] = {}
    for name in headers:
        match = object_pattern.fullmatch(name)
        if match:
            object_headers.setdefault(match.group(1).lower(), match.group(1))

    header_objects: dict[str, str] = {}
    for lowered, object_header in object_headers.items():
        fields = _create_object(headers, lowered, object_header)
        key = lower_first(object_header[object_header.rindex("-") + 1 :])
        header_objects[key] = to_json(fields).decode("utf-8")
        log_debug(f"Header object {key} from {object_header}")

    return header_objects


def _create_object(headers: Mapping[str, str], lowered: str, object_header: str) -> dict[str, str]:
    fields: dict[str, str] = {}

    value = next((v for k, v in headers.items() if k.lower() == lowered), None)
    if value is not None:
        if not VALID_HEADER_FORMAT.fullmatch(value):
            raise BadRequestError(f"{object_header} is not in a legal format.")
        for pair in value.split(";"):
            if pair.strip():
                key, _, field_value = pair.partition("=")
                fields[key] = field_value

    property_pattern = re.compile(rf"{re.escape(lowered)}-\w+", re.IGNORECASE)
    for name, property_value in headers.items():
        if property_pattern.fullmatch(name):
            fields[lower_first(name[name.rindex("-") + 1 :])] = property_value

    return fields


__all__ = ["VALID_HEADER_FORMAT", "lower_first", "process_vendor_headers"]
