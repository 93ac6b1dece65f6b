"""Query filter vocabulary and validation.

Filters narrow which connections a read returns. Only two keys exist:
``type`` (exact string match) and ``distance`` (exact hop count).
Validation happens before any storage access.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypedDict

from connectctl.domain.errors import InvalidFilterError

FILTER_KEYS: frozenset[str] = frozenset({"type", "distance"})


class ConnectionFilters(TypedDict, total=False):
    """Recognized filter keys."""

    type: str
    distance: int


def validate_filters(filters: Mapping[str, Any]) -> None:
    """Raise :class:`InvalidFilterError` if *filters* is malformed.

    Examples:
        >>> validate_filters({"type": "follow", "distance": 2})
        >>> validate_filters({"bogus": 1})
        Traceback (most recent call last):
        ...
        connectctl.domain.errors.InvalidFilterError: Unsupported filter key(s): bogus
    """
    if not isinstance(filters, Mapping):
        msg = f"Filters must be a mapping, got {type(filters).__name__}"
        raise InvalidFilterError(msg)

    unknown = sorted(str(key) for key in filters if key not in FILTER_KEYS)
    if unknown:
        msg = f"Unsupported filter key(s): {', '.join(unknown)}"
        raise InvalidFilterError(msg)

    if "type" in filters and not isinstance(filters["type"], str):
        msg = f"Filter 'type' must be a string, got {type(filters['type']).__name__}"
        raise InvalidFilterError(msg)

    if "distance" in filters:
        distance = filters["distance"]
        # bool is an int subclass; True is not a distance.
        if isinstance(distance, bool) or not isinstance(distance, int) or distance < 0:
            msg = f"Filter 'distance' must be a non-negative integer, got {distance!r}"
            raise InvalidFilterError(msg)


class FilterValidator:
    """Injectable wrapper around :func:`validate_filters`."""

    def validate_filters(self, filters: Mapping[str, Any]) -> None:
        validate_filters(filters)
