from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Mapping, Optional, Union, get_args

FilterType = Literal["week", "month", "year", "custom", "last6months", "last3months", "lastmonth"]
Granularity = Literal["day", "week", "month"]

FILTER_TYPES = get_args(FilterType)
GRANULARITIES = get_args(Granularity)

DateLike = Union[str, date, datetime]


@dataclass(frozen=True)
class DateFilter:
    """Date filter selected on a dashboard screen.

    Only the fields matching ``type`` are read; leftovers from a previous
    type are kept and ignored.
    """
    type: FilterType = "last6months"
    week: Optional[str] = None
    month: Optional[str] = None
    year: Optional[str] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None

    def __post_init__(self):
        if self.type not in FILTER_TYPES:
            raise ValueError(f"Unknown date filter type: {self.type!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DateFilter":
        """Build from the camelCase wire form used by the web client."""
        return cls(
            type=data.get("type", "last6months"),
            week=data.get("week"),
            month=data.get("month"),
            year=None if data.get("year") is None else str(data.get("year")),
            start_date=data.get("startDate", data.get("start_date")),
            end_date=data.get("endDate", data.get("end_date")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type}
        for key, value in (
            ("week", self.week),
            ("month", self.month),
            ("year", self.year),
            ("startDate", self.start_date),
            ("endDate", self.end_date),
        ):
            if value is not None:
                out[key] = value.isoformat() if isinstance(value, (date, datetime)) else value
        return out

    def evolve(self, **changes: Any) -> "DateFilter":
        return replace(self, **changes)


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 0
    total: int = 0
    total_pages: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["Pagination"]:
        if not data:
            return None
        return cls(
            page=int(data.get("page", 1) or 1),
            limit=int(data.get("limit", 0) or 0),
            total=int(data.get("total", 0) or 0),
            total_pages=int(data.get("totalPages", 0) or 0),
        )


@dataclass(frozen=True)
class Page:
    """One page of a list endpoint: ``data`` plus root-level ``pagination``."""
    data: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Optional[Pagination] = None
