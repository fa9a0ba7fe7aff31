import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.security import get_current_user_id
from app.db import dynamo
from app.models.expense import Category, ExpenseCreate, ExpenseInDB, ExpensePublic
from app.utils.date_filters import DateRangeFilter, start_date

router = APIRouter()
logger = logging.getLogger(__name__)


def to_public(expense: Dict[str, Any]) -> ExpensePublic:
    category = expense.get("category")
    return ExpensePublic(
        expense_id=expense["expense_id"],
        amount=float(expense["amount"]),
        description=expense.get("description", ""),
        date=str(expense["date"]),
        category=Category(**category) if category and category.get("name") else None,
    )


def public_expenses(expenses: List[Dict[str, Any]]) -> List[ExpensePublic]:
    """Render stored rows, leaving out any that cannot be displayed."""
    rendered = []
    for exp in expenses:
        try:
            rendered.append(to_public(exp))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Leaving malformed expense {exp.get('expense_id')} out of the listing: {e}")
    return rendered


@router.post("/", response_model=ExpensePublic, status_code=status.HTTP_201_CREATED)
def create_expense(expense: ExpenseCreate, user_id: str = Depends(get_current_user_id)):
    category = dynamo.get_category(expense.category_id)
    if not category:
        raise HTTPException(status_code=400, detail="Invalid category")

    expense_db = ExpenseInDB.from_create(user_id, expense)
    if not dynamo.put_expense(expense_db.model_dump()):
        raise HTTPException(status_code=500, detail="Failed to save expense")

    logger.info(f"Expense {expense_db.expense_id} created for user {user_id}")
    return to_public({**expense_db.model_dump(), "category": category})


@router.get("/", response_model=List[ExpensePublic])
def list_expenses(
    filter: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
):
    """
    filter is one of all, week, month, 3months. Anything else means all.
    """
    date_filter = DateRangeFilter.parse(filter)
    expenses = dynamo.get_expenses_for_user(user_id, start_date(date_filter))
    if expenses is None:
        raise HTTPException(status_code=500, detail="Failed to load expenses")
    return public_expenses(expenses)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.get_expense(user_id, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")

    if not dynamo.delete_expense(user_id, expense_id):
        raise HTTPException(status_code=500, detail="Failed to delete expense")

    logger.info(f"Expense {expense_id} deleted for user {user_id}")
    return None
