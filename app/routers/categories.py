from typing import List

from fastapi import APIRouter, Depends

from app.core.security import get_current_user_id
from app.db import dynamo
from app.models.expense import Category

router = APIRouter()


@router.get("/", response_model=List[Category])
def list_categories(user_id: str = Depends(get_current_user_id)):
    """Categories offered by the add-expense form."""
    return [Category(**category) for category in dynamo.list_categories()]
