"""
Health Check Router
Liveness plus DynamoDB table reachability
"""
from datetime import datetime
import logging

from fastapi import APIRouter
from botocore.exceptions import ClientError

from app.core.config import settings
from app.db import dynamo

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/status")
def storage_status():
    """
    Check that the expenses and categories tables can be read.
    """
    tables = {
        "expenses": (dynamo.expenses_table, settings.DYNAMO_EXPENSES_TABLE),
        "categories": (dynamo.categories_table, settings.DYNAMO_CATEGORIES_TABLE),
    }

    dynamodb_status = {
        "region": settings.DYNAMO_REGION,
        "tables": {},
    }
    for key, (table, name) in tables.items():
        try:
            table.scan(Limit=1)
            dynamodb_status["tables"][key] = {"name": name, "status": "accessible"}
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            dynamodb_status["tables"][key] = {"name": name, "status": "error", "error": error_code}
            logger.error(f"DynamoDB check failed for {name}: {str(e)}")

    dynamodb_status["connected"] = all(
        table["status"] == "accessible" for table in dynamodb_status["tables"].values()
    )

    return {
        "timestamp": datetime.utcnow().isoformat(),
        "services": {"dynamodb": dynamodb_status},
        "overall_status": "healthy" if dynamodb_status["connected"] else "degraded",
    }
