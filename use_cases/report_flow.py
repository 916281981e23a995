"""Period report preparation for application layer orchestration."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from services import analytics_service, date_range_service
from services.date_range_service import DEFAULT_DATE_FIELD, DateField
from use_cases.domain_models import DateFilter, Granularity


@dataclass(frozen=True)
class PeriodReport:
    """Filtered records bucketed by period, ready for a chart and a table."""

    records: List[Any] = field(default_factory=list)
    buckets: Dict[str, List[Any]] = field(default_factory=dict)
    period_keys: List[str] = field(default_factory=list)
    frame: pd.DataFrame = field(default_factory=pd.DataFrame)
    label: str = ""
    granularity: str = "month"

    @property
    def is_empty(self) -> bool:
        return not self.records


def build_period_report(
    records: Optional[Sequence[Any]],
    date_filter: DateFilter,
    granularity: Granularity = "month",
    *,
    date_field: DateField = DEFAULT_DATE_FIELD,
    value_field: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PeriodReport:
    """Filter ``records`` by ``date_filter`` and group what is left by ``granularity``."""
    label = date_range_service.describe_filter(date_filter)
    if not records:
        return PeriodReport(label=label, granularity=granularity,
                            frame=analytics_service.compute_period_frame({}, value_field))

    selected = date_range_service.filter_by_date_range(records, date_filter, date_field, now=now)
    buckets = date_range_service.group_by_period(selected, granularity, date_field)
    return PeriodReport(
        records=selected,
        buckets=buckets,
        period_keys=date_range_service.order_period_keys(buckets.keys()),
        frame=analytics_service.compute_period_frame(buckets, value_field),
        label=label,
        granularity=granularity,
    )
