"""
Date range filtering and period bucketing for dashboard records.

Records are API payload dicts (or any object) carrying a date-valued field,
``createdAt`` unless told otherwise. Nothing here raises on bad record data:
records with a missing or unparsable date are simply left out.

Week numbers follow the dashboard's simplified scheme, not ISO-8601:
``ceil((days_since_jan1 + jan1_weekday + 1) / 7)`` with Sunday as weekday 0,
so week 1 is whichever partial week contains January 1st.
"""

import calendar
import logging
import math
import re
from datetime import date, datetime, time
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar, Union

import pandas as pd

from use_cases.domain_models import GRANULARITIES, DateFilter, DateLike, FilterType, Granularity

log = logging.getLogger(__name__)

T = TypeVar("T")
DateField = Union[str, Callable[[Any], Any]]

DEFAULT_DATE_FIELD = "createdAt"
ROLLING_MONTHS = {"lastmonth": 1, "last3months": 3, "last6months": 6}
END_OF_DAY = time(23, 59, 59, 999000)

FILTER_LABELS = {
    "lastmonth": "Last Month",
    "last3months": "Last 3 Months",
    "last6months": "Last 6 Months",
    "week": "Week",
    "month": "Month",
    "year": "Year",
    "custom": "Custom Range",
}

_WEEK_SUFFIX = re.compile(r"W\d+$")
_PERIOD_KEY = re.compile(r"^(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?-?$")


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a record date value to a naive local datetime, or None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        dt = _parse_string(value.strip())
        if dt is None:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone().replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            # Offset pushes the instant outside the representable range
            return None
    return dt


def _parse_string(text: str) -> Optional[datetime]:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
    except ValueError:
        pass
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is pd.NaT or pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def _select(record: Any, date_field: DateField) -> Any:
    try:
        if callable(date_field):
            return date_field(record)
        if isinstance(record, dict):
            return record.get(date_field)
        return getattr(record, date_field, None)
    except (AttributeError, KeyError, IndexError, TypeError):
        return None


def _resolve_now(now: Optional[Union[date, datetime]]) -> datetime:
    resolved = to_datetime(now) if now is not None else None
    return resolved or datetime.now()


def week_number(value: datetime) -> int:
    jan1 = datetime(value.year, 1, 1)
    days = (value - jan1).total_seconds() / 86400
    sunday_based_weekday = (jan1.weekday() + 1) % 7
    return math.ceil((days + sunday_based_weekday + 1) / 7)


def week_key(value: datetime) -> str:
    return f"{value.year}-W{week_number(value):02d}"


def period_key(value: datetime, granularity: Granularity) -> Optional[str]:
    if granularity == "day":
        return value.strftime("%Y-%m-%d")
    if granularity == "month":
        return value.strftime("%Y-%m")
    if granularity == "week":
        return week_key(value)
    return None


def rolling_window(months_back: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """First day of ``now.month - months_back`` through the end of the current month."""
    now = _resolve_now(now)
    start_year, start_month0 = divmod(now.year * 12 + (now.month - 1) - months_back, 12)
    start = datetime(start_year, start_month0 + 1, 1)
    last_day = calendar.monthrange(now.year, now.month)[1]
    end = datetime.combine(date(now.year, now.month, last_day), END_OF_DAY)
    return start, end


def parse_week(value: str) -> Optional[Tuple[int, int]]:
    parts = value.split("-W")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def parse_month(value: str) -> Optional[Tuple[int, int]]:
    parts = value.split("-")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def custom_window(start_date: Optional[DateLike], end_date: Optional[DateLike]) -> Optional[Tuple[datetime, datetime]]:
    start = to_datetime(start_date) if start_date else None
    end = to_datetime(end_date) if end_date else None
    if start is None or end is None:
        return None
    return datetime.combine(start.date(), time.min), datetime.combine(end.date(), END_OF_DAY)


def classify(
    record: Any,
    date_filter: DateFilter,
    date_field: DateField = DEFAULT_DATE_FIELD,
    now: Optional[datetime] = None,
) -> bool:
    """Return True when the record's date falls inside ``date_filter``."""
    item_date = to_datetime(_select(record, date_field))
    if item_date is None:
        return False

    kind = date_filter.type
    if kind in ROLLING_MONTHS:
        start, end = rolling_window(ROLLING_MONTHS[kind], now)
        return start <= item_date <= end

    if kind == "week" and date_filter.week:
        parsed = parse_week(date_filter.week)
        if parsed is None:
            return False
        year, week = parsed
        return item_date.year == year and week_number(item_date) == week

    if kind == "month" and date_filter.month:
        parsed = parse_month(date_filter.month)
        if parsed is None:
            return False
        year, month = parsed
        return item_date.year == year and item_date.month == month

    if kind == "year" and date_filter.year:
        try:
            return item_date.year == int(str(date_filter.year).strip())
        except ValueError:
            return False

    if kind == "custom" and date_filter.start_date and date_filter.end_date:
        window = custom_window(date_filter.start_date, date_filter.end_date)
        if window is None:
            return False
        return window[0] <= item_date <= window[1]

    return False


def filter_by_date_range(
    records: Iterable[T],
    date_filter: DateFilter,
    date_field: DateField = DEFAULT_DATE_FIELD,
    now: Optional[datetime] = None,
) -> List[T]:
    now = _resolve_now(now)
    return [r for r in records if classify(r, date_filter, date_field, now=now)]


def group_by_period(
    records: Iterable[T],
    granularity: Granularity,
    date_field: DateField = DEFAULT_DATE_FIELD,
) -> Dict[str, List[T]]:
    """Bucket records by day, week or month; undated records are dropped."""
    if granularity not in GRANULARITIES:
        log.warning(f"Unknown period granularity {granularity!r}, nothing grouped")
        return {}

    grouped: Dict[str, List[T]] = {}
    for record in records:
        item_date = to_datetime(_select(record, date_field))
        if item_date is None:
            continue
        grouped.setdefault(period_key(item_date, granularity), []).append(record)
    return grouped


def _key_instant(key: Any) -> Optional[datetime]:
    if not isinstance(key, str):
        return None
    match = _PERIOD_KEY.match(_WEEK_SUFFIX.sub("", key))
    if not match:
        return None
    year, month, day = match.groups()
    try:
        return datetime(int(year), int(month or 1), int(day or 1))
    except ValueError:
        return None


def _compare_keys(a: str, b: str) -> int:
    instant_a, instant_b = _key_instant(a), _key_instant(b)
    if instant_a is not None and instant_b is not None and instant_a != instant_b:
        return -1 if instant_a < instant_b else 1
    a_str, b_str = str(a), str(b)
    return (a_str > b_str) - (a_str < b_str)


def order_period_keys(keys: Iterable[str]) -> List[str]:
    """
    Chronological order for chart axes.

    Week keys are compared by the year implied once the ``Www`` suffix is
    stripped; ties and unparsable keys fall back to plain string order.
    """
    return sorted(keys, key=cmp_to_key(_compare_keys))


def with_type(date_filter: DateFilter, new_type: FilterType, now: Optional[datetime] = None) -> DateFilter:
    """Switch filter type, filling the current week/month/year when the field is empty."""
    now = _resolve_now(now)
    changes: Dict[str, Any] = {"type": new_type}
    if new_type == "week" and not date_filter.week:
        changes["week"] = week_key(now)
    elif new_type == "month" and not date_filter.month:
        changes["month"] = now.strftime("%Y-%m")
    elif new_type == "year" and not date_filter.year:
        changes["year"] = str(now.year)
    return date_filter.evolve(**changes)


def describe_filter(date_filter: DateFilter) -> str:
    kind = date_filter.type
    if kind in ROLLING_MONTHS:
        return FILTER_LABELS[kind]
    if kind == "week":
        return f"Week {date_filter.week}" if date_filter.week else "Week"
    if kind == "month":
        return f"Month {date_filter.month}" if date_filter.month else "Month"
    if kind == "year":
        return f"Year {date_filter.year}" if date_filter.year else "Year"
    window = custom_window(date_filter.start_date, date_filter.end_date)
    if window is None:
        return FILTER_LABELS["custom"]
    return f"{window[0].date()} - {window[1].date()}"
