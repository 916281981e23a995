import pandas as pd
from typing import Any, Dict, List, Mapping, Optional, Sequence

from services.date_range_service import order_period_keys


def _numeric(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def compute_period_frame(
    buckets: Mapping[str, Sequence[Any]],
    value_field: Optional[str] = None,
) -> pd.DataFrame:
    """
    Chart-ready frame from period buckets.

    One row per period key in chronological order with the record ``count``;
    when ``value_field`` is given a ``total`` column sums that field
    (non-numeric values count as 0).
    """
    columns = ["period", "count"] + (["total"] if value_field else [])
    if not buckets:
        return pd.DataFrame(columns=columns)

    rows = []
    for key in order_period_keys(buckets.keys()):
        records = buckets[key]
        row: Dict[str, Any] = {"period": key, "count": len(records)}
        if value_field:
            row["total"] = sum(_numeric(_field(r, value_field)) for r in records)
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def compute_status_breakdown(records: Sequence[Any], status_field: str = "status") -> pd.DataFrame:
    """Record counts per status, largest first."""
    if not records:
        return pd.DataFrame(columns=[status_field, "count"])
    statuses = pd.Series([_field(r, status_field) or "Unknown" for r in records], name=status_field)
    return (
        statuses.value_counts()
        .rename_axis(status_field)
        .reset_index(name="count")
        .sort_values(["count", status_field], ascending=[False, True])
        .reset_index(drop=True)
    )


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def records_to_frame(records: List[Dict[str, Any]], columns: Optional[List[str]] = None) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=columns or [])
    df = pd.DataFrame.from_records(records)
    if columns:
        df = df[[c for c in columns if c in df.columns]]
    return df
