import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
expenses_table = dynamodb.Table(settings.DYNAMO_EXPENSES_TABLE)
categories_table = dynamodb.Table(settings.DYNAMO_CATEGORIES_TABLE)


def list_categories() -> List[Dict[str, Any]]:
    """Return every category, sorted by name."""
    try:
        items: List[Dict[str, Any]] = []
        kwargs: Dict[str, Any] = {}
        while True:
            response = categories_table.scan(**kwargs)
            items.extend(response.get("Items", []))
            if "LastEvaluatedKey" not in response:
                break
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        return sorted((_from_dynamo(item) for item in items), key=lambda c: c.get("name") or "")
    except ClientError as e:
        logger.error(f"list_categories failed: {e.response['Error']['Message']}")
        return []


def get_category(category_id: str) -> Optional[Dict[str, Any]]:
    try:
        response = categories_table.get_item(Key={"category_id": category_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_category failed: {e.response['Error']['Message']}")
        return None


def put_expense(expense_item: dict) -> bool:
    """Insert an expense for a user."""
    try:
        expenses_table.put_item(Item=_convert_for_dynamo(expense_item))
        return True
    except ClientError as e:
        logger.error(f"put_expense failed: {e.response['Error']['Message']}")
        return False


def get_expenses_for_user(user_id: str, start: Optional[date] = None) -> Optional[List[Dict[str, Any]]]:
    """
    Query all expenses for a user, newest first, with their category joined in.
    When ``start`` is given only expenses dated on or after it are returned.
    Returns None when the query itself fails so callers can tell it apart from
    an empty history.
    """
    kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
    if start is not None:
        kwargs["FilterExpression"] = Attr("date").gte(start.isoformat())

    try:
        items: List[Dict[str, Any]] = []
        while True:
            response = expenses_table.query(**kwargs)
            items.extend(response.get("Items", []))
            if "LastEvaluatedKey" not in response:
                break
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
    except ClientError as e:
        logger.error(f"get_expenses_for_user failed: {e.response['Error']['Message']}")
        return None

    expenses = [_expense_from_dynamo(item) for item in items]
    categories = {c["category_id"]: c for c in list_categories()}
    for exp in expenses:
        exp["category"] = _category_ref(categories.get(exp.get("category_id")))
    expenses.sort(key=lambda exp: (exp.get("date", ""), exp.get("created_at", "")), reverse=True)
    return expenses


def get_expense(user_id: str, expense_id: str) -> Optional[Dict[str, Any]]:
    """Fetch a single expense item."""
    try:
        response = expenses_table.get_item(Key={"user_id": user_id, "expense_id": expense_id})
        item = response.get("Item")
        return _expense_from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_expense failed: {e.response['Error']['Message']}")
        return None


def delete_expense(user_id: str, expense_id: str) -> bool:
    """Delete a specific expense item. The key includes user_id, so other users' rows are never touched."""
    try:
        response = expenses_table.delete_item(
            Key={"user_id": user_id, "expense_id": expense_id},
            ReturnValues="ALL_OLD",
        )
        return "Attributes" in response
    except ClientError as e:
        logger.error(f"delete_expense failed: {e.response['Error']['Message']}")
        return False


def _category_ref(category: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    # A category without a usable name is shown the same way as no category at all
    if not category:
        return None
    name = category.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return {
        "category_id": category["category_id"],
        "name": name.strip(),
        "icon": category.get("icon"),
        "color": category.get("color"),
    }


def _expense_from_dynamo(item: Dict[str, Any]) -> Dict[str, Any]:
    """Like _from_dynamo, but the amount stays a Decimal for exact summing."""
    expense = _from_dynamo(item)
    if isinstance(item.get("amount"), Decimal):
        expense["amount"] = item["amount"]
    return expense


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
