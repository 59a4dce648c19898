"""
StudyHub Backend — Stats Service Unit Tests
============================================

What we test:
    ✅ Empty database yields all zeros
    ✅ Counts and counter sums across subjects and resources
    ✅ SQLAlchemy errors wrapped in DatabaseError
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from studyhub.exceptions import DatabaseError
from studyhub.schemas.resource import ResourceCreate
from studyhub.schemas.subject import SubjectCreate
from studyhub.services.resource_service import resource_service
from studyhub.services.stats_service import StatsService
from studyhub.services.subject_service import subject_service


class TestStatsService:

    def setup_method(self):
        self.service = StatsService()

    @pytest.mark.asyncio
    async def test_empty_database_is_all_zero(self, db_session):
        stats = await self.service.compute_stats(db_session)
        assert stats.model_dump() == {"subjects": 0, "resources": 0, "downloads": 0, "views": 0}

    @pytest.mark.asyncio
    async def test_totals(self, db_session):
        await subject_service.create_subject(db_session, SubjectCreate(name="Math"))
        await subject_service.create_subject(db_session, SubjectCreate(name="Physics"))
        first = await resource_service.create_resource(db_session, ResourceCreate(name="A", subject="Math"))
        second = await resource_service.create_resource(db_session, ResourceCreate(name="B"))
        await resource_service.create_resource(db_session, ResourceCreate(name="C"))

        await resource_service.record_download(db_session, first.id)
        await resource_service.record_download(db_session, first.id)
        await resource_service.record_download(db_session, second.id)
        await resource_service.get_resource(db_session, second.id)

        stats = await self.service.compute_stats(db_session)

        assert stats.subjects == 2
        assert stats.resources == 3
        assert stats.downloads == 3
        assert stats.views == 1

    @pytest.mark.asyncio
    async def test_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("connection lost")
        with pytest.raises(DatabaseError):
            await self.service.compute_stats(mock_db_session)
