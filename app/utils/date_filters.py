"""
Date range filters for expense queries.

A filter is an explicit value handed to the query-building step; the
aggregator never looks at it to decide which rows to include.
"""
from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class DateRangeFilter(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "3months"

    @classmethod
    def parse(cls, value: Optional[str]) -> "DateRangeFilter":
        if not value:
            return cls.ALL
        normalized = value.strip()
        if normalized == "threeMonths":
            return cls.THREE_MONTHS
        try:
            return cls(normalized)
        except ValueError:
            logger.debug(f"Unknown date filter {value!r}, falling back to 'all'")
            return cls.ALL


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def start_date(date_filter: DateRangeFilter, today: Optional[date] = None) -> Optional[date]:
    """Inclusive lower bound for the filter, or None when unbounded."""
    today = today or date.today()
    if date_filter == DateRangeFilter.WEEK:
        return today - timedelta(days=7)
    if date_filter == DateRangeFilter.MONTH:
        return _months_back(today, 1)
    if date_filter == DateRangeFilter.THREE_MONTHS:
        return _months_back(today, 3)
    return None


def parse_expense_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def filter_expenses(
    expenses: List[Dict[str, Any]],
    date_filter: DateRangeFilter,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Keep the expenses dated on or after the filter's start boundary.

    Rows with an unreadable date are kept so the aggregator can account for
    them under its own skip policy.
    """
    boundary = start_date(date_filter, today)
    if boundary is None:
        return list(expenses)

    kept = []
    for exp in expenses:
        exp_date = parse_expense_date(exp.get("date"))
        if exp_date is None or exp_date >= boundary:
            kept.append(exp)
    return kept
