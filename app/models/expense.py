from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

# Largest amount a single expense may carry: 12 digits, 2 of them after the point
MAX_AMOUNT = Decimal("9999999999.99")


class Category(BaseModel):
    category_id: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class ExpenseCreate(BaseModel):
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    description: str
    date: date
    category_id: str

    @field_validator("amount", mode="before")
    @classmethod
    def amount_must_be_positive(cls, value: Any) -> Decimal:
        # Form input arrives as text; only finite positive numbers get through
        if value is None or isinstance(value, bool):
            raise ValueError("Amount must be a positive number")
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValueError("Amount must be a positive number")
        if not amount.is_finite() or amount <= 0:
            raise ValueError("Amount must be a positive number")
        if amount > MAX_AMOUNT:
            raise ValueError("Amount is too large")
        return amount

    @field_validator("description", "category_id")
    @classmethod
    def must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("All fields are required")
        return value


class ExpenseInDB(BaseModel):
    user_id: str
    expense_id: str = Field(default_factory=lambda: uuid4().hex)
    amount: Decimal
    description: str
    date: str
    category_id: Optional[str] = None
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    @classmethod
    def from_create(cls, user_id: str, expense: ExpenseCreate) -> "ExpenseInDB":
        return cls(
            user_id=user_id,
            amount=expense.amount,
            description=expense.description,
            date=expense.date.isoformat(),
            category_id=expense.category_id,
        )


class ExpensePublic(BaseModel):
    expense_id: str
    amount: float
    description: str
    date: str
    category: Optional[Category] = None
