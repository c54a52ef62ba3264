"""Helper utilities."""

import math
from datetime import datetime, timezone
from typing import Any, List, Optional


def parse_list_field(value: Any, lowercase: bool = False) -> List[str]:
    """
    Normalize a raw request value into a list of strings.

    Accepts a list (``["React", " CSS "]``) or a comma-delimited string
    (``"React, CSS"``). Items are trimmed, empty items dropped, and
    optionally lowercased. ``None`` becomes an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValueError("must be a list of strings or a comma-separated string")

    result = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError("must be a list of strings or a comma-separated string")
        item = item.strip()
        if not item:
            continue
        result.append(item.lower() if lowercase else item)
    return result


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC (the storage convention)."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items."""
    return math.ceil(total / page_size) if page_size > 0 else 0


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally (escape char ``\\``)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def round_average(total: float, count: int) -> float:
    """Average rounded to 2 decimals; 0 for an empty set."""
    return round(total / count, 2) if count > 0 else 0
