"""Health check router."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.health import HealthResponse, HealthStatus, ReadinessResponse
from ..services.mailer import mail_dispatcher
from .responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/health", tags=["health"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/ping", response_model=HealthResponse)
async def health_ping() -> JSONResponse:
    """
    Health check endpoint.

    Returns current service status and timestamp.
    """
    response_data = HealthResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.utcnow(),
        version="1.0.0"
    )

    logger.debug(
        "Health check requested",
        extra={
            "status": response_data.status,
            "timestamp": response_data.timestamp.isoformat()
        }
    )

    return ok(response_data)


@router.post("/ready", response_model=ReadinessResponse)
async def health_ready(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Readiness check: the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning(f"Database readiness check failed: {str(e)}")
        database = "unavailable"

    status = HealthStatus.HEALTHY if database == "ok" else HealthStatus.DEGRADED
    return ok(
        ReadinessResponse(status=status, checks={"database": database}, pending_mail=mail_dispatcher.pending),
        status_code=200 if status == HealthStatus.HEALTHY else 503,
    )
