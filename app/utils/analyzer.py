from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.models.expense import MAX_AMOUNT
from app.utils.date_filters import DateRangeFilter, parse_expense_date

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")
ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthlyAmount:
    month: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "amount": float(self.amount)}


@dataclass(frozen=True)
class CategoryShare:
    """Summed spend for one category and its share of the total."""

    category: str
    amount: Decimal
    percentage_of_total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "amount": float(self.amount),
            "percentage_of_total": float(self.percentage_of_total),
        }


@dataclass(frozen=True)
class AggregateStats:
    total_spent: Decimal = ZERO
    avg_daily: Decimal = ZERO
    avg_monthly: Decimal = ZERO
    monthly_series: Tuple[MonthlyAmount, ...] = ()
    category_breakdown: Tuple[CategoryShare, ...] = ()
    highest_expense: Decimal = ZERO
    expense_count: int = 0
    skipped_count: int = 0
    date_filter: DateRangeFilter = field(default=DateRangeFilter.ALL)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_spent": float(self.total_spent),
            "avg_daily": float(self.avg_daily),
            "avg_monthly": float(self.avg_monthly),
            "monthly_series": [item.to_dict() for item in self.monthly_series],
            "category_breakdown": [item.to_dict() for item in self.category_breakdown],
            "highest_expense": float(self.highest_expense),
            "expense_count": self.expense_count,
            "skipped_count": self.skipped_count,
            "date_filter": self.date_filter.value,
        }


@dataclass(frozen=True)
class _Entry:
    amount: Decimal
    month: str
    category: str
    day: date


def _to_amount(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        return None
    return amount


def _category_name(value: Any) -> str:
    if isinstance(value, dict):
        value = value.get("name")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNCATEGORIZED


class ExpenseStatsAggregator:
    """
    Turns a list of expense rows into dashboard statistics.

    The aggregator is pure: callers narrow the rows to the wanted date range
    beforehand and call it again on the unfiltered rows for all-time figures.
    Rows with a malformed amount or date are skipped and counted.
    """

    def __init__(self, trend_window: int = 3) -> None:
        self._trend_window = trend_window

    def _entries(self, expenses: Iterable[Dict[str, Any]]) -> Tuple[List[_Entry], int]:
        entries: List[_Entry] = []
        skipped = 0
        for exp in expenses:
            amount = _to_amount(exp.get("amount"))
            day = parse_expense_date(exp.get("date"))
            if amount is None or day is None:
                skipped += 1
                logger.warning(
                    f"Skipping expense {exp.get('id') or exp.get('expense_id')}: "
                    f"amount={exp.get('amount')!r} date={exp.get('date')!r}"
                )
                continue
            entries.append(
                _Entry(
                    amount=amount,
                    month=day.strftime("%Y-%m"),
                    category=_category_name(exp.get("category")),
                    day=day,
                )
            )
        return entries, skipped

    @staticmethod
    def days_since_start(oldest: date, now: datetime) -> int:
        elapsed = now - datetime.combine(oldest, time.min, tzinfo=now.tzinfo)
        return max(1, math.ceil(elapsed.total_seconds() / 86400))

    @staticmethod
    def monthly_series(entries: List[_Entry]) -> Tuple[MonthlyAmount, ...]:
        totals: Dict[str, Decimal] = defaultdict(Decimal)
        for entry in entries:
            totals[entry.month] += entry.amount
        return tuple(MonthlyAmount(month, totals[month]) for month in sorted(totals))

    @staticmethod
    def category_breakdown(entries: List[_Entry], total: Decimal) -> Tuple[CategoryShare, ...]:
        totals: Dict[str, Decimal] = defaultdict(Decimal)
        for entry in entries:
            totals[entry.category] += entry.amount

        ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
        shares = []
        for category, amount in ordered:
            if total:
                percentage = (amount / total * 100).quantize(TENTHS, rounding=ROUND_HALF_UP)
            else:
                percentage = ZERO
            shares.append(CategoryShare(category, amount, percentage))
        return tuple(shares)

    def average_monthly(self, series: Tuple[MonthlyAmount, ...], total: Decimal) -> Decimal:
        if not series:
            return total
        recent = series[-self._trend_window:]
        mean = sum((item.amount for item in recent), ZERO) / len(recent)
        return mean.quantize(CENTS, rounding=ROUND_HALF_UP)

    def compute(
        self,
        expenses: Iterable[Dict[str, Any]],
        date_filter: DateRangeFilter = DateRangeFilter.ALL,
        now: Optional[datetime] = None,
    ) -> AggregateStats:
        entries, skipped = self._entries(expenses)
        if not entries:
            return AggregateStats(skipped_count=skipped, date_filter=date_filter)

        now = now or datetime.now()
        total = sum((entry.amount for entry in entries), ZERO)
        days = self.days_since_start(min(entry.day for entry in entries), now)
        series = self.monthly_series(entries)

        return AggregateStats(
            total_spent=total,
            avg_daily=(total / days).quantize(CENTS, rounding=ROUND_HALF_UP),
            avg_monthly=self.average_monthly(series, total),
            monthly_series=series,
            category_breakdown=self.category_breakdown(entries, total),
            highest_expense=max(entry.amount for entry in entries),
            expense_count=len(entries),
            skipped_count=skipped,
            date_filter=date_filter,
        )


_default_aggregator = ExpenseStatsAggregator()


def compute(
    expenses: Iterable[Dict[str, Any]],
    date_filter: DateRangeFilter = DateRangeFilter.ALL,
    now: Optional[datetime] = None,
) -> AggregateStats:
    return _default_aggregator.compute(expenses, date_filter, now)
