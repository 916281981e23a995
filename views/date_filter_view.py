from datetime import datetime
from typing import Optional, Tuple

import streamlit as st

from services.date_range_service import FILTER_LABELS, to_datetime, with_type
from use_cases.domain_models import DateFilter

FILTER_TYPE_ORDER = list(FILTER_LABELS.keys())
YEARS_BACK, YEARS_AHEAD = 10, 5


def _as_date(value):
    dt = to_datetime(value)
    return dt.date() if dt else None


def year_range(year: Optional[str], now: Optional[datetime] = None) -> Tuple[int, int, int]:
    """Widget value plus bounds around the current year, widened to keep a stored year as is."""
    current = (now or datetime.now()).year
    try:
        value = int(str(year).strip())
    except (TypeError, ValueError):
        value = current
    return value, min(current - YEARS_BACK, value), max(current + YEARS_AHEAD, value)


def render_date_filter(current: DateFilter, key: str = "date_filter", compact: bool = False) -> DateFilter:
    """Filter type select plus the input matching the type; returns the new filter."""
    c_type, c_value = st.columns([1, 2] if not compact else [1, 1])

    with c_type:
        chosen = st.selectbox(
            "Period",
            FILTER_TYPE_ORDER,
            index=FILTER_TYPE_ORDER.index(current.type),
            format_func=lambda t: FILTER_LABELS[t],
            key=f"{key}_type",
            label_visibility="collapsed" if compact else "visible",
        )

    updated = current if chosen == current.type else with_type(current, chosen)

    with c_value:
        if updated.type == "week":
            week = st.text_input("Week (YYYY-Www)", value=updated.week or "", key=f"{key}_week")
            updated = updated.evolve(week=week.strip() or None)
        elif updated.type == "month":
            month = st.text_input("Month (YYYY-MM)", value=updated.month or "", key=f"{key}_month")
            updated = updated.evolve(month=month.strip() or None)
        elif updated.type == "year":
            year_value, year_min, year_max = year_range(updated.year)
            year = st.number_input(
                "Year",
                min_value=year_min,
                max_value=year_max,
                value=year_value,
                step=1,
                key=f"{key}_year",
            )
            updated = updated.evolve(year=str(int(year)))
        elif updated.type == "custom":
            c_start, c_end = st.columns(2)
            with c_start:
                start = st.date_input("From", value=_as_date(updated.start_date), key=f"{key}_start")
            with c_end:
                end = st.date_input("To", value=_as_date(updated.end_date), key=f"{key}_end")
            updated = updated.evolve(start_date=start, end_date=end)

    return updated
