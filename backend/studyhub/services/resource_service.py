"""
StudyHub Backend — Resource Service
====================================

What:  CRUD, filtered/paginated listing and counters for resources.
How:   Async SQLAlchemy against the caller's session; keeps
       Subject.resource_count in step through SubjectService.
Who:   Called by routes/resources.py.

Counter rules:
    - get_resource():    views     = views + 1      (every successful fetch)
    - record_download(): downloads = downloads + 1  (views untouched)
    - create/delete:     subject resource_count ±1
    - update:            if `subject` changes, old subject −1 and new +1

    All increments are single UPDATE statements evaluated by the database,
    and the resource write and the subject adjustment share the request's
    transaction (see database.get_db_session).
"""

import logging
import math
import uuid
from typing import Optional, Union

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.exceptions import DatabaseError, NotFoundError
from studyhub.models.resource import Resource
from studyhub.schemas.resource import (
    ResourceCreate,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdate,
)
from studyhub.services.subject_service import escape_like, parse_id, subject_service

logger = logging.getLogger(__name__)


class ResourceService:
    """
    Business logic layer for resources.

    Responsibilities:
        - list_resources(): filters, search, newest-first pagination
        - get_resource(): single fetch that counts a view
        - create_resource() / update_resource() / delete_resource()
        - record_download(): download counter
    """

    async def list_resources(
        self,
        db: AsyncSession,
        subject: Optional[str] = None,
        resource_type: Optional[str] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ResourceListResponse:
        """
        List resources matching all given filters, newest first.

        Args:
            db: Async database session
            subject: Exact subject name
            resource_type: Exact resource type
            year: Exact year
            search: Case-insensitive substring of name OR description
            page: 1-based page number
            limit: Page size

        Returns:
            ResourceListResponse with count (this page), total (all pages),
            page and pages = ceil(total / limit)

        Query plan (no filters):
            SELECT ... ORDER BY created_at DESC LIMIT :limit OFFSET :skip
            SELECT count(*) ...
        """
        page = max(page, 1)
        limit = max(limit, 1)

        conditions = []
        if subject:
            conditions.append(Resource.subject == subject)
        if resource_type:
            conditions.append(Resource.type == resource_type)
        if year is not None:
            conditions.append(Resource.year == year)
        if search:
            pattern = f"%{escape_like(search)}%"
            conditions.append(
                or_(
                    Resource.name.ilike(pattern, escape="\\"),
                    Resource.description.ilike(pattern, escape="\\"),
                )
            )

        query = select(Resource)
        count_query = select(func.count(Resource.id))
        for condition in conditions:
            query = query.where(condition)
            count_query = count_query.where(condition)

        query = (
            query.order_by(Resource.created_at.desc(), Resource.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        try:
            result = await db.execute(query)
            resources = list(result.scalars().all())
            total = (await db.execute(count_query)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing resources: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve resources. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return ResourceListResponse(
            count=len(resources),
            total=total,
            page=page,
            pages=math.ceil(total / limit),
            resources=[ResourceResponse.model_validate(r) for r in resources],
        )

    async def get_resource(self, db: AsyncSession, resource_id: Union[str, uuid.UUID]) -> Resource:
        """
        Fetch a resource and count the view.

        The view is counted before the row is read back, so the returned
        entity already includes it. A missing id touches no counter.

        Raises:
            NotFoundError: No resource with that id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        key = parse_id(resource_id, "Resource")
        stmt = (
            update(Resource)
            .where(Resource.id == key)
            .values(views=Resource.views + 1)
            .returning(Resource.id)
            .execution_options(synchronize_session=False)
        )
        try:
            bumped = (await db.execute(stmt)).scalar_one_or_none()
            if bumped is None:
                raise NotFoundError(resource="Resource", resource_id=str(key))
            resource = await db.get(Resource, key, populate_existing=True)
        except SQLAlchemyError as e:
            logger.error("Database error fetching resource %s: %s", key, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the resource. Please try again.",
                context={"resource_id": str(key)},
            ) from e

        return resource

    async def create_resource(self, db: AsyncSession, data: ResourceCreate) -> Resource:
        """
        Persist a new resource and add one to its subject's resource_count.

        A subject name that matches no subject is stored as given; the
        counter step is then a no-op.
        """
        resource = Resource(**data.model_dump(), downloads=0, views=0)
        try:
            db.add(resource)
            await db.flush()
            await db.refresh(resource)
        except SQLAlchemyError as e:
            logger.error("Database error creating resource: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the resource. Please try again.",
                context={"subject": data.subject},
            ) from e

        await subject_service.adjust_resource_count(db, resource.subject, +1)
        logger.info("Resource created: %s (subject=%r)", resource.id, resource.subject)
        return resource

    async def update_resource(
        self,
        db: AsyncSession,
        resource_id: Union[str, uuid.UUID],
        data: ResourceUpdate,
    ) -> Resource:
        """
        Merge the supplied fields into an existing resource.

        When `subject` changes, the previous subject loses one from its
        resource_count and the new one gains one. views/downloads are not
        writable here.

        Raises:
            NotFoundError: No resource with that id
            DatabaseError: Update failed
        """
        resource = await self._get_or_404(db, resource_id)
        changes = data.model_dump(exclude_unset=True)
        previous_subject = resource.subject

        for key, value in changes.items():
            setattr(resource, key, value)

        try:
            await db.flush()
            await db.refresh(resource)
        except SQLAlchemyError as e:
            logger.error("Database error updating resource %s: %s", resource.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the resource. Please try again.",
                context={"resource_id": str(resource.id)},
            ) from e

        if "subject" in changes and changes["subject"] != previous_subject:
            await subject_service.adjust_resource_count(db, previous_subject, -1)
            await subject_service.adjust_resource_count(db, changes["subject"], +1)
            logger.info(
                "Resource %s moved from subject %r to %r",
                resource.id,
                previous_subject,
                changes["subject"],
            )

        return resource

    async def delete_resource(self, db: AsyncSession, resource_id: Union[str, uuid.UUID]) -> None:
        """
        Delete a resource and subtract one from its subject's resource_count.

        Raises:
            NotFoundError: No resource with that id
            DatabaseError: Delete failed
        """
        resource = await self._get_or_404(db, resource_id)
        subject_name = resource.subject
        try:
            await db.delete(resource)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting resource %s: %s", resource.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the resource. Please try again.",
                context={"resource_id": str(resource.id)},
            ) from e

        await subject_service.adjust_resource_count(db, subject_name, -1)
        logger.info("Resource deleted: %s (subject=%r)", resource.id, subject_name)

    async def record_download(self, db: AsyncSession, resource_id: Union[str, uuid.UUID]) -> int:
        """
        Count one download and return the new total.

        Unlike get_resource() this does not count a view.

        Raises:
            NotFoundError: No resource with that id
        """
        key = parse_id(resource_id, "Resource")
        stmt = (
            update(Resource)
            .where(Resource.id == key)
            .values(downloads=Resource.downloads + 1)
            .returning(Resource.downloads)
            .execution_options(synchronize_session=False)
        )
        try:
            downloads = (await db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error recording download for %s: %s", key, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not record the download. Please try again.",
                context={"resource_id": str(key)},
            ) from e

        if downloads is None:
            raise NotFoundError(resource="Resource", resource_id=str(key))
        return downloads

    async def _get_or_404(self, db: AsyncSession, resource_id: Union[str, uuid.UUID]) -> Resource:
        key = parse_id(resource_id, "Resource")
        try:
            resource = await db.get(Resource, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching resource %s: %s", key, str(e), exc_info=True)
            raise DatabaseError(context={"resource_id": str(key)}) from e

        if resource is None:
            raise NotFoundError(resource="Resource", resource_id=str(key))
        return resource


resource_service = ResourceService()
