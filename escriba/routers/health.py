"""
Health check endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from datetime import datetime, timezone
import logging

from escriba.config import settings
from escriba.database import get_db
from escriba.models.schemas import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint to verify system status.

    Returns:
        HealthCheckResponse with database status and whether both model
        endpoints have credentials configured
    """
    db_status = "ok"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "error"

    gateway_status = "ok" if settings.AI_GATEWAY_API_KEY else "unconfigured"
    abstract_status = "ok" if settings.OPENAI_API_KEY else "unconfigured"

    overall_status = (
        "healthy"
        if db_status == "ok" and gateway_status == "ok" and abstract_status == "ok"
        else "degraded"
    )

    return HealthCheckResponse(
        status=overall_status,
        database=db_status,
        ai_gateway=gateway_status,
        abstract_model=abstract_status,
        timestamp=datetime.now(timezone.utc),
    )
