"""
StudyHub Backend — Stats Service
=================================

What:  Site-wide totals for the landing page: number of subjects and
       resources, and the sums of resource downloads and views.
How:   Two aggregate queries. The resource count and both sums come from
       the same SELECT; the subject count is a separate query, so a write
       landing between the two can make the snapshot slightly inconsistent.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.exceptions import DatabaseError
from studyhub.models.resource import Resource
from studyhub.models.subject import Subject
from studyhub.schemas.common import Stats

logger = logging.getLogger(__name__)


class StatsService:

    async def compute_stats(self, db: AsyncSession) -> Stats:
        """
        Returns:
            Stats(subjects, resources, downloads, views); all zero on an
            empty database (SUM over no rows is coalesced to 0)
        """
        try:
            subjects = (await db.execute(select(func.count(Subject.id)))).scalar() or 0
            row = (
                await db.execute(
                    select(
                        func.count(Resource.id),
                        func.coalesce(func.sum(Resource.downloads), 0),
                        func.coalesce(func.sum(Resource.views), 0),
                    )
                )
            ).one()
        except SQLAlchemyError as e:
            logger.error("Database error computing stats: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not compute statistics. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        resources, downloads, views = row
        return Stats(
            subjects=subjects,
            resources=resources or 0,
            downloads=int(downloads or 0),
            views=int(views or 0),
        )


stats_service = StatsService()
