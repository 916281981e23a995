"""Application layer contracts for orchestrating high-level flows."""

from .domain_models import DateFilter, FilterType, Granularity, Page, Pagination
from .session_models import Role, Session

__all__ = [
    "DateFilter",
    "FilterType",
    "Granularity",
    "Page",
    "Pagination",
    "Role",
    "Session",
]
