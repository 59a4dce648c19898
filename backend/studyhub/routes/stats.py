"""
StudyHub Backend — Stats Route
===============================

What:  GET /api/stats — totals shown on the landing page.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.database import get_db_session
from studyhub.schemas.common import StatsResponse
from studyhub.services.stats_service import stats_service

router = APIRouter(prefix="/api", tags=["Stats"])


@router.get("/stats", response_model=StatsResponse, summary="Site-wide totals")
async def get_stats(db: AsyncSession = Depends(get_db_session)) -> StatsResponse:
    stats = await stats_service.compute_stats(db)
    return StatsResponse(stats=stats)
