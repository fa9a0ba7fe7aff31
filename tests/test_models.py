from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.models.expense import Category, ExpenseCreate, ExpenseInDB

valid_form = {
    "amount": "12.50",
    "description": "  Lunch  ",
    "date": "2024-02-01",
    "category_id": "food",
}


def test_valid_expense():
    expense = ExpenseCreate(**valid_form)
    assert expense.amount == Decimal("12.50")
    assert expense.description == "Lunch"
    assert expense.date == date(2024, 2, 1)


@pytest.mark.parametrize("amount", ["0", "-3", "abc", "", "NaN", "Infinity", None, True])
def test_rejects_bad_amounts(amount):
    with pytest.raises(ValidationError) as exc:
        ExpenseCreate(**{**valid_form, "amount": amount})
    assert "Amount must be a positive number" in str(exc.value)


@pytest.mark.parametrize("field", ["description", "category_id"])
def test_rejects_blank_text(field):
    with pytest.raises(ValidationError) as exc:
        ExpenseCreate(**{**valid_form, field: "   "})
    assert "All fields are required" in str(exc.value)


@pytest.mark.parametrize("field", ["amount", "description", "date", "category_id"])
def test_rejects_missing_fields(field):
    form = {k: v for k, v in valid_form.items() if k != field}
    with pytest.raises(ValidationError):
        ExpenseCreate(**form)


def test_in_db_from_create():
    expense = ExpenseCreate(**valid_form)
    stored = ExpenseInDB.from_create("user-1", expense)
    assert stored.user_id == "user-1"
    assert stored.date == "2024-02-01"
    assert stored.category_id == "food"
    assert len(stored.expense_id) == 32


@pytest.mark.parametrize("amount", ["1e30", "10000000000", "1.234"])
def test_rejects_amounts_that_cannot_be_stored(amount):
    with pytest.raises(ValidationError):
        ExpenseCreate(**{**valid_form, "amount": amount})


def test_accepts_largest_amount():
    expense = ExpenseCreate(**{**valid_form, "amount": "9999999999.99"})
    assert expense.amount == Decimal("9999999999.99")


def test_category_icon_is_optional():
    category = Category(category_id="food", name="Food")
    assert category.icon is None
    assert Category(category_id="food", name="Food", icon="utensils").icon == "utensils"
