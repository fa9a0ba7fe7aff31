import logging
from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.security import get_current_user_id
from app.db import dynamo
from app.routers.expenses import public_expenses
from app.utils.analyzer import ExpenseStatsAggregator
from app.utils.date_filters import DateRangeFilter, filter_expenses

router = APIRouter()
logger = logging.getLogger(__name__)
stats_aggregator = ExpenseStatsAggregator()


@router.get("/")
def get_dashboard(
    filter: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    """
    Expenses in the selected range with their statistics, plus all-time
    statistics for comparison.
    """
    date_filter = DateRangeFilter.parse(filter)

    all_expenses = dynamo.get_expenses_for_user(user_id)
    if all_expenses is None:
        raise HTTPException(status_code=500, detail="Failed to load expenses")

    now = datetime.now()
    expenses = filter_expenses(all_expenses, date_filter, now.date())
    stats = stats_aggregator.compute(expenses, date_filter, now)
    all_time_stats = stats_aggregator.compute(all_expenses, DateRangeFilter.ALL, now)
    logger.info(
        f"Dashboard for user {user_id}: filter={date_filter.value} "
        f"expenses={len(expenses)}/{len(all_expenses)} total={stats.total_spent}"
    )

    return {
        "filter": date_filter.value,
        "expenses": [exp.model_dump() for exp in public_expenses(expenses)],
        "stats": stats.to_dict(),
        "all_time_stats": all_time_stats.to_dict(),
    }
