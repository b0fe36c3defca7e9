"""Filtering, full-text search, sorting and pagination over a collection.

Nothing here mutates the collection it is given; every step returns a new
list. The order of operations is filter, search, sort, then page, and the
reported total is taken after search and before paging.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset({"_page", "_limit", "_sort", "_order", "q"})

MAX_LIMIT = 1000

_MISSING = object()
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_JSON_NUMBER = re.compile(r"-?\d+(\.\d+)?([eE][+-]?\d+)?")


@dataclass
class ListQuery:
    filters: Dict[str, Any] = field(default_factory=dict)
    q: Any = None
    sort: Optional[str] = None
    order: Any = None
    page: Any = None
    limit: Any = None

    @classmethod
    def from_params(cls, params: Mapping) -> ListQuery:
        """Split request parameters into reserved options and field filters."""
        params = dict(params.items())
        return cls(
            filters={k: v for k, v in params.items() if k not in RESERVED_PARAMS},
            q=params.get("q"),
            sort=params.get("_sort"),
            order=params.get("_order"),
            page=params.get("_page"),
            limit=params.get("_limit"),
        )


@dataclass
class QueryResult:
    items: List[Any]
    total: int


# --- Filtering ---


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_number(text: str) -> Optional[float]:
    """Value of a string spelled as a JSON number, else None."""
    text = text.strip()
    if not _JSON_NUMBER.fullmatch(text):
        return None
    return float(text)


def _bool_matches(flag: bool, other: Any) -> bool:
    if isinstance(other, bool):
        return flag == other
    if isinstance(other, str):
        return other.strip().lower() == ("true" if flag else "false")
    return False


def loose_equals(actual: Any, expected: Any) -> bool:
    """Compare a record value with a filter value.

    Strings compare case-insensitively. A string and a number are equal when
    the string is a JSON number with that value. A boolean equals the string
    "true" or "false". Null and a missing field are equal to each other only.
    """
    if actual is _MISSING:
        actual = None
    if isinstance(actual, str) and isinstance(expected, str):
        return actual.lower() == expected.lower()
    if actual is None or expected is None:
        return actual is None and expected is None
    if isinstance(actual, bool):
        return _bool_matches(actual, expected)
    if isinstance(expected, bool):
        return _bool_matches(expected, actual)
    if _is_number(actual) and _is_number(expected):
        return actual == expected
    if _is_number(actual) and isinstance(expected, str):
        return _as_number(expected) == actual
    if isinstance(actual, str) and _is_number(expected):
        return _as_number(actual) == expected
    if isinstance(actual, str) or isinstance(expected, str):
        return False
    if _is_number(actual) or _is_number(expected):
        return False
    return actual == expected


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, _MISSING)
    return _MISSING


def matches(record: Any, filters: Mapping) -> bool:
    """True when every non-reserved filter matches the record."""
    for key, expected in filters.items():
        if key in RESERVED_PARAMS:
            continue
        if not loose_equals(_field(record, key), expected):
            return False
    return True


# --- Full-text search ---


def full_text(record: Any, needle: Any) -> bool:
    haystack = json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(needle).lower() in haystack.lower()


# --- Sorting ---


def _sort_key(value: Any):
    if _is_number(value):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    if isinstance(value, bool):
        return (2, value)
    return (3, 0)


def sort_records(records: Sequence[Any], sort_key: Optional[str], order: Any = None) -> List[Any]:
    """Stable sort by one field; ``order`` of "desc" reverses it."""
    if not sort_key:
        return list(records)
    descending = str(order or "asc").lower() == "desc"
    return sorted(
        records,
        key=lambda record: _sort_key(_field(record, sort_key)),
        reverse=descending,
    )


# --- Pagination ---


def parse_int(value: Any, default: int) -> int:
    """Leading integer of ``value``, or ``default`` when there is none."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value))
    if not match:
        return default
    try:
        return int(match.group(1))
    except ValueError:
        # too many digits to convert
        return default


def paginate(records: Sequence[Any], page: Any = None, limit: Any = None) -> List[Any]:
    page_number = max(1, parse_int(page, 1))
    page_size = max(1, min(MAX_LIMIT, parse_int(limit, len(records))))
    start = (page_number - 1) * page_size
    return list(records[start:start + page_size])


# --- Entry point ---


def run_query(records: Sequence[Any], query: ListQuery) -> QueryResult:
    items = [r for r in records if matches(r, query.filters)]
    if query.q:
        items = [r for r in items if full_text(r, query.q)]
    items = sort_records(items, query.sort, query.order)
    total = len(items)
    page = paginate(items, query.page, query.limit)
    logger.debug("Query matched %d of %d records, returning %d", total, len(records), len(page))
    return QueryResult(items=page, total=total)
