"""Query string parsing and flattening.

Operations take one string per parameter, so a repeated query key is
collapsed into a JSON array string that an object-list parameter can
decode.

Example:
    >>> simplify_query_parameters({"id": ["7"], "tag": ["a", "b"]})
    {'id': '7', 'tag': '["a","b"]'}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import parse_qs

from pydantic_core import to_json


def simplify_query_parameters(query: Mapping[str, Iterable[str]]) -> dict[str, str]:
    """Flatten a multi-valued query mapping.

    Args:
        query: Query key to its values, in order.

    Returns:
        One string per key: the value itself when there is exactly one,
        otherwise a JSON array of every value.
    """
    simplified: dict[str, str] = {}
    for key, values in query.items():
        items = list(values or [])
        if len(items) == 1:
            simplified[key] = items[0]
        else:
            simplified[key] = to_json(items).decode("utf-8")
    return simplified


def parse_query(query_string: str) -> dict[str, list[str]]:
    """Parse a raw query string into its multi-valued mapping.

    Blank values are kept, so ``?name=`` supplies an empty ``name``.
    The result is what ServiceGateway.handle expects as ``query``.
    """
    return parse_qs(query_string, keep_blank_values=True)


__all__ = ["simplify_query_parameters", "parse_query"]
