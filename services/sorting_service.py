from datetime import datetime
from functools import cmp_to_key
from typing import Any, Iterable, List, Literal, Optional, TypeVar

from services.date_range_service import to_datetime

T = TypeVar("T")
SortDirection = Optional[Literal["asc", "desc"]]


def nested_value(record: Any, path: str) -> Any:
    """Resolve dotted keys such as ``project.name``; missing links give None."""
    current = record
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, dict):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return current


def _compare_values(a: Any, b: Any) -> int:
    if isinstance(a, bool) or isinstance(b, bool):
        a, b = str(a), str(b)
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return (a > b) - (a < b)
    if isinstance(a, datetime) and isinstance(b, datetime):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        da, db = to_datetime(a), to_datetime(b)
        if da is not None and db is not None:
            return (da > db) - (da < db)
        a_low, b_low = a.lower(), b.lower()
        return (a_low > b_low) - (a_low < b_low)
    a_str, b_str = str(a).lower(), str(b).lower()
    return (a_str > b_str) - (a_str < b_str)


def sort_records(records: Iterable[T], key: Optional[str], direction: SortDirection) -> List[T]:
    """
    Sort table rows by ``key`` in ``direction``.

    Missing values go last when ascending and first when descending.
    ``direction=None`` (or no key) keeps the incoming order.
    """
    rows = list(records)
    if not key or direction not in ("asc", "desc"):
        return rows

    sign = 1 if direction == "asc" else -1

    def compare(a: T, b: T) -> int:
        va, vb = nested_value(a, key), nested_value(b, key)
        if va is None and vb is None:
            return 0
        if va is None:
            return sign
        if vb is None:
            return -sign
        return sign * _compare_values(va, vb)

    return sorted(rows, key=cmp_to_key(compare))


def next_direction(current_key: Optional[str], current_direction: SortDirection, key: str) -> SortDirection:
    """Clicking a column header cycles asc -> desc -> unsorted."""
    if current_key != key:
        return "asc"
    if current_direction == "asc":
        return "desc"
    if current_direction == "desc":
        return None
    return "asc"


def sort_indicator(current_key: Optional[str], current_direction: SortDirection, key: str) -> Optional[str]:
    if current_key != key or not current_direction:
        return None
    return "↑" if current_direction == "asc" else "↓"
