"""
StudyHub Backend — Resource Service Unit Tests
===============================================

What:  Tests for ResourceService: filtered/paginated listing, view and
       download counters, and Subject.resource_count bookkeeping.
How:   Real AsyncSession against the SQLite test database; AsyncMock
       sessions for the database-failure paths.

What we test:
    ✅ Pagination arithmetic (count / total / page / pages)
    ✅ Filters by subject, type, year; search over name OR description
    ✅ Newest first ordering
    ✅ get_resource counts exactly one view per fetch
    ✅ record_download counts downloads only
    ✅ Create/delete adjust the subject's resource_count; update rebalances
    ✅ Not found for unknown and malformed ids (no counters touched)
"""

import uuid

import pytest
from sqlalchemy.exc import SQLAlchemyError

from studyhub.exceptions import DatabaseError, NotFoundError
from studyhub.schemas.resource import ResourceCreate, ResourceUpdate
from studyhub.schemas.subject import SubjectCreate
from studyhub.services.resource_service import ResourceService
from studyhub.services.subject_service import subject_service


class TestResourceServiceListing:
    """Tests for list_resources."""

    def setup_method(self):
        self.service = ResourceService()

    @pytest.mark.asyncio
    async def test_pagination_counts(self, db_session):
        for i in range(25):
            await self.service.create_resource(db_session, ResourceCreate(name=f"Paper {i}"))

        page = await self.service.list_resources(db_session, page=2, limit=10)

        assert page.count == 10
        assert page.total == 25
        assert page.page == 2
        assert page.pages == 3

    @pytest.mark.asyncio
    async def test_last_partial_page(self, db_session):
        for i in range(25):
            await self.service.create_resource(db_session, ResourceCreate(name=f"Paper {i}"))

        page = await self.service.list_resources(db_session, page=3, limit=10)
        assert page.count == 5

    @pytest.mark.asyncio
    async def test_empty_store(self, db_session):
        page = await self.service.list_resources(db_session)
        assert page.count == 0
        assert page.total == 0
        assert page.pages == 0
        assert page.resources == []

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session):
        for name in ["first", "second", "third"]:
            await self.service.create_resource(db_session, ResourceCreate(name=name))

        page = await self.service.list_resources(db_session)
        assert [r.name for r in page.resources] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_filters_combine_with_and(self, db_session):
        await self.service.create_resource(
            db_session, ResourceCreate(name="A", subject="Math", type="notes", year=2023)
        )
        await self.service.create_resource(
            db_session, ResourceCreate(name="B", subject="Math", type="past-papers", year=2023)
        )
        await self.service.create_resource(
            db_session, ResourceCreate(name="C", subject="Physics", type="notes", year=2022)
        )

        by_subject = await self.service.list_resources(db_session, subject="Math")
        by_type = await self.service.list_resources(db_session, resource_type="notes")
        combined = await self.service.list_resources(
            db_session, subject="Math", resource_type="notes", year=2023
        )

        assert by_subject.total == 2
        assert by_type.total == 2
        assert [r.name for r in combined.resources] == ["A"]

    @pytest.mark.asyncio
    async def test_search_matches_name_or_description(self, db_session):
        await self.service.create_resource(db_session, ResourceCreate(name="Cell Biology Notes"))
        await self.service.create_resource(
            db_session, ResourceCreate(name="Revision pack", description="Biochemistry pathways")
        )
        await self.service.create_resource(db_session, ResourceCreate(name="Organic Chemistry"))

        page = await self.service.list_resources(db_session, search="bio")

        assert page.total == 2
        assert {r.name for r in page.resources} == {"Cell Biology Notes", "Revision pack"}


class TestResourceServiceCounters:
    """Tests for view and download counters."""

    def setup_method(self):
        self.service = ResourceService()

    @pytest.mark.asyncio
    async def test_each_fetch_counts_one_view(self, db_session):
        created = await self.service.create_resource(db_session, ResourceCreate(name="Notes"))
        assert created.views == 0

        first = await self.service.get_resource(db_session, created.id)
        assert first.views == 1
        second = await self.service.get_resource(db_session, str(created.id))
        assert second.views == 2

    @pytest.mark.asyncio
    async def test_download_does_not_count_view(self, db_session):
        created = await self.service.create_resource(db_session, ResourceCreate(name="Notes"))

        assert await self.service.record_download(db_session, created.id) == 1
        assert await self.service.record_download(db_session, created.id) == 2

        await db_session.refresh(created)
        assert created.downloads == 2
        assert created.views == 0

    @pytest.mark.asyncio
    async def test_get_missing_resource(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_resource(db_session, uuid.uuid4())
        assert exc_info.value.message == "Resource not found"

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_resource(db_session, "12345")

    @pytest.mark.asyncio
    async def test_download_missing_resource(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.record_download(db_session, uuid.uuid4())


class TestResourceServiceSubjectCount:
    """Tests for Subject.resource_count maintenance."""

    def setup_method(self):
        self.service = ResourceService()

    @pytest.mark.asyncio
    async def test_create_and_delete_net_count(self, db_session):
        math = await subject_service.create_subject(db_session, SubjectCreate(name="Math"))

        created = []
        for i in range(4):
            created.append(
                await self.service.create_resource(db_session, ResourceCreate(name=f"R{i}", subject="Math"))
            )
        await self.service.delete_resource(db_session, created[0].id)

        await db_session.refresh(math)
        assert math.resource_count == 3

    @pytest.mark.asyncio
    async def test_unknown_subject_still_creates(self, db_session):
        resource = await self.service.create_resource(
            db_session, ResourceCreate(name="Orphan", subject="Astrology")
        )
        assert resource.subject == "Astrology"

    @pytest.mark.asyncio
    async def test_update_moves_count_between_subjects(self, db_session):
        math = await subject_service.create_subject(db_session, SubjectCreate(name="Math"))
        physics = await subject_service.create_subject(db_session, SubjectCreate(name="Physics"))
        resource = await self.service.create_resource(
            db_session, ResourceCreate(name="Mechanics", subject="Math")
        )

        updated = await self.service.update_resource(
            db_session, resource.id, ResourceUpdate(subject="Physics")
        )

        await db_session.refresh(math)
        await db_session.refresh(physics)
        assert updated.subject == "Physics"
        assert math.resource_count == 0
        assert physics.resource_count == 1

    @pytest.mark.asyncio
    async def test_update_without_subject_change_keeps_count(self, db_session):
        math = await subject_service.create_subject(db_session, SubjectCreate(name="Math"))
        resource = await self.service.create_resource(
            db_session, ResourceCreate(name="Algebra", subject="Math", year=2021)
        )

        updated = await self.service.update_resource(db_session, resource.id, ResourceUpdate(year=2024))

        await db_session.refresh(math)
        assert updated.year == 2024
        assert updated.name == "Algebra"
        assert math.resource_count == 1

    @pytest.mark.asyncio
    async def test_delete_missing_resource(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete_resource(db_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_update_missing_resource(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_resource(db_session, uuid.uuid4(), ResourceUpdate(name="X"))


class TestResourceServiceDatabaseErrors:
    """SQLAlchemy failures surface as DatabaseError."""

    def setup_method(self):
        self.service = ResourceService()

    @pytest.mark.asyncio
    async def test_list_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("connection lost")
        with pytest.raises(DatabaseError):
            await self.service.list_resources(mock_db_session)

    @pytest.mark.asyncio
    async def test_download_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("connection lost")
        with pytest.raises(DatabaseError) as exc_info:
            await self.service.record_download(mock_db_session, uuid.uuid4())
        assert "resource_id" in exc_info.value.context

    @pytest.mark.asyncio
    async def test_create_wraps_flush_error(self, mock_db_session):
        mock_db_session.flush.side_effect = SQLAlchemyError("constraint")
        with pytest.raises(DatabaseError):
            await self.service.create_resource(mock_db_session, ResourceCreate(name="X"))
