"""
StudyHub Backend — Health Check Route
======================================

What:  Liveness endpoint for Docker health checks and load balancers.
How:   Reports OK while the process serves requests and probes the database
       with a lightweight SELECT 1.

The endpoint answers 200 even when the database is unreachable; the
`database` field carries the probe result so monitoring can alert on it.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from studyhub.database import engine
from studyhub.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        database=db_status,
    )
