from datetime import date

import pytest

from app.utils.date_filters import DateRangeFilter, filter_expenses, parse_expense_date, start_date

TODAY = date(2024, 5, 31)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, DateRangeFilter.ALL),
        ("", DateRangeFilter.ALL),
        ("all", DateRangeFilter.ALL),
        ("week", DateRangeFilter.WEEK),
        ("month", DateRangeFilter.MONTH),
        ("3months", DateRangeFilter.THREE_MONTHS),
        ("threeMonths", DateRangeFilter.THREE_MONTHS),
        ("yesterday", DateRangeFilter.ALL),
    ],
)
def test_parse(raw, expected):
    assert DateRangeFilter.parse(raw) is expected


def test_start_dates():
    assert start_date(DateRangeFilter.ALL, TODAY) is None
    assert start_date(DateRangeFilter.WEEK, TODAY) == date(2024, 5, 24)
    assert start_date(DateRangeFilter.MONTH, TODAY) == date(2024, 4, 30)
    assert start_date(DateRangeFilter.THREE_MONTHS, TODAY) == date(2024, 2, 29)


def test_month_arithmetic_crosses_year_boundary():
    assert start_date(DateRangeFilter.THREE_MONTHS, date(2024, 1, 15)) == date(2023, 10, 15)


def test_parse_expense_date():
    assert parse_expense_date("2024-01-05") == date(2024, 1, 5)
    assert parse_expense_date("2024-01-05T10:00:00Z") == date(2024, 1, 5)
    assert parse_expense_date(date(2024, 1, 5)) == date(2024, 1, 5)
    assert parse_expense_date("garbage") is None
    assert parse_expense_date(None) is None


def test_filter_expenses_is_inclusive():
    expenses = [
        {"expense_id": "1", "date": "2024-05-24"},
        {"expense_id": "2", "date": "2024-05-23"},
        {"expense_id": "3", "date": "2024-05-30"},
        {"expense_id": "4", "date": None},
    ]
    kept = filter_expenses(expenses, DateRangeFilter.WEEK, TODAY)
    assert [exp["expense_id"] for exp in kept] == ["1", "3", "4"]


def test_filter_all_returns_copy():
    expenses = [{"expense_id": "1", "date": "1999-01-01"}]
    kept = filter_expenses(expenses, DateRangeFilter.ALL, TODAY)
    assert kept == expenses
    assert kept is not expenses
