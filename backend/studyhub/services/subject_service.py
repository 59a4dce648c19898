"""
StudyHub Backend — Subject Service
===================================

What:  CRUD and filtered listing over subjects, plus the resource_count
       adjustment used by ResourceService.
How:   Async SQLAlchemy queries against the session passed in by the caller.
Who:   Called by routes/subjects.py and by ResourceService.

Counter rule:
    resource_count is changed only through adjust_resource_count(), which
    issues a single `resource_count = resource_count + :delta` UPDATE.
    There is no read-modify-write, so concurrent resource creates/deletes
    never lose an increment. Decrements never take the count below zero.
"""

import logging
import re
import uuid
from typing import List, Optional, Union

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from studyhub.exceptions import DatabaseError, NotFoundError, ValidationError
from studyhub.models.subject import Subject
from studyhub.schemas.subject import SubjectCreate, SubjectUpdate

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    Lower-case, URL-safe form of a subject name.

    "Computer Science (A-Level)" → "computer-science-a-level"
    """
    return _SLUG_STRIP.sub("-", value.lower()).strip("-")


def escape_like(term: str) -> str:
    """Escapes LIKE wildcards so user search text matches literally (escape char: backslash)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_id(raw: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """
    Converts a path id into a UUID.

    Ids that are not UUIDs cannot exist in the table, so they are reported
    as not found instead of as a malformed request.
    """
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(raw)) from None


class SubjectService:
    """
    Business logic layer for subjects.

    Responsibilities:
        - list_subjects(): category filter + name search, sorted by name
        - get_by_id() / get_by_slug(): single lookups with not-found handling
        - create_subject() / update_subject() / delete_subject()
        - adjust_resource_count(): atomic counter change by subject name

    Error Handling Strategy:
        SQLAlchemy errors are logged and wrapped in DatabaseError.
        NotFoundError and ValidationError propagate as-is.
    """

    async def list_subjects(
        self,
        db: AsyncSession,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Subject]:
        """
        List subjects sorted by name ascending.

        Args:
            db: Async database session
            category: Exact category match; None, "" or "all" disables the filter
            search: Case-insensitive substring of the name

        Returns:
            Matching subjects (empty list when nothing matches)
        """
        query = select(Subject)
        if category and category != "all":
            query = query.where(Subject.category == category)
        if search:
            query = query.where(Subject.name.ilike(f"%{escape_like(search)}%", escape="\\"))
        query = query.order_by(Subject.name.asc())

        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing subjects: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve subjects. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_by_id(self, db: AsyncSession, subject_id: Union[str, uuid.UUID]) -> Subject:
        """
        Fetch a subject by primary key.

        Raises:
            NotFoundError: No subject with that id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        key = parse_id(subject_id, "Subject")
        try:
            subject = await db.get(Subject, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching subject %s: %s", key, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the subject. Please try again.",
                context={"subject_id": str(key)},
            ) from e

        if subject is None:
            raise NotFoundError(resource="Subject", resource_id=str(key))
        return subject

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Subject:
        """Fetch a subject by its unique slug. Raises NotFoundError if absent."""
        try:
            result = await db.execute(select(Subject).where(Subject.slug == slug))
            subject = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching subject slug=%s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the subject. Please try again.",
                context={"slug": slug},
            ) from e

        if subject is None:
            raise NotFoundError(resource="Subject", resource_id=slug)
        return subject

    async def create_subject(self, db: AsyncSession, data: SubjectCreate) -> Subject:
        """
        Persist a new subject.

        The slug is taken from the payload when given, otherwise derived from
        the name; either way it is normalized with slugify(). resource_count
        always starts at 0.

        Raises:
            ValidationError: The slug is already taken or has no letters or digits (→ 400)
            DatabaseError: Insert failed (→ 500)
        """
        fields = data.model_dump(exclude={"slug"})
        if data.slug is not None:
            slug = slugify(data.slug)
            if not slug:
                raise ValidationError(message="slug must contain letters or digits", field="slug")
        else:
            # Names made only of symbols still need a unique key
            slug = slugify(data.name) or uuid.uuid4().hex[:8]

        await self._ensure_slug_available(db, slug)

        subject = Subject(**fields, slug=slug, resource_count=0)
        try:
            db.add(subject)
            await db.flush()
            await db.refresh(subject)
        except SQLAlchemyError as e:
            logger.error("Database error creating subject: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the subject. Please try again.",
                context={"slug": slug},
            ) from e

        logger.info("Subject created: %s (slug=%s)", subject.id, subject.slug)
        return subject

    async def update_subject(
        self,
        db: AsyncSession,
        subject_id: Union[str, uuid.UUID],
        data: SubjectUpdate,
    ) -> Subject:
        """
        Merge the supplied fields into an existing subject.

        Keys absent from the request body are left untouched. Renaming a
        subject does not touch resources that reference the old name.

        Raises:
            NotFoundError: No subject with that id
            ValidationError: New slug collides with another subject
            DatabaseError: Update failed
        """
        subject = await self.get_by_id(db, subject_id)
        changes = data.model_dump(exclude_unset=True)

        if "slug" in changes:
            changes["slug"] = slugify(changes["slug"])
            if not changes["slug"]:
                raise ValidationError(message="slug must contain letters or digits", field="slug")
            if changes["slug"] != subject.slug:
                await self._ensure_slug_available(db, changes["slug"])

        for key, value in changes.items():
            setattr(subject, key, value)

        try:
            await db.flush()
            await db.refresh(subject)
        except SQLAlchemyError as e:
            logger.error("Database error updating subject %s: %s", subject.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the subject. Please try again.",
                context={"subject_id": str(subject.id)},
            ) from e

        logger.info("Subject updated: %s (fields=%s)", subject.id, sorted(changes))
        return subject

    async def delete_subject(self, db: AsyncSession, subject_id: Union[str, uuid.UUID]) -> None:
        """
        Delete a subject. Resources naming it are kept as they are.

        Raises:
            NotFoundError: No subject with that id
            DatabaseError: Delete failed
        """
        subject = await self.get_by_id(db, subject_id)
        try:
            await db.delete(subject)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting subject %s: %s", subject.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the subject. Please try again.",
                context={"subject_id": str(subject.id)},
            ) from e

        logger.info("Subject deleted: %s", subject.id)

    async def adjust_resource_count(
        self,
        db: AsyncSession,
        subject_name: Optional[str],
        delta: int,
    ) -> int:
        """
        Add `delta` to resource_count of the subject named `subject_name`.

        Only the oldest subject with that name is touched. When nothing
        matches (no subject of that name, empty name, or a decrement that
        would go below zero) this is a no-op: the resource operation that
        triggered it still succeeds.

        Objects already loaded in `db` are not refreshed; callers that need
        the new value must refresh the subject.

        Returns:
            Number of subject rows changed (0 or 1)
        """
        if not subject_name or delta == 0:
            return 0

        # Aliased so the subquery is not correlated to the UPDATE target
        oldest = aliased(Subject)
        target = (
            select(oldest.id)
            .where(oldest.name == subject_name)
            .order_by(oldest.created_at.asc(), oldest.id.asc())
            .limit(1)
            .scalar_subquery()
        )
        stmt = (
            update(Subject)
            .where(Subject.id == target)
            .values(resource_count=Subject.resource_count + delta)
            .execution_options(synchronize_session=False)
        )
        if delta < 0:
            stmt = stmt.where(Subject.resource_count >= -delta)

        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(
                "Database error adjusting resource_count for subject %r: %s",
                subject_name,
                str(e),
                exc_info=True,
            )
            raise DatabaseError(
                message="Could not update the subject resource count.",
                context={"subject": subject_name, "delta": delta},
            ) from e

        if result.rowcount == 0:
            logger.debug("No subject adjusted for name=%r (delta=%+d)", subject_name, delta)
        return result.rowcount

    async def _ensure_slug_available(self, db: AsyncSession, slug: str) -> None:
        """Raises ValidationError if another subject already uses `slug`."""
        try:
            result = await db.execute(select(Subject.id).where(Subject.slug == slug))
            taken = result.first() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking slug %s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(context={"slug": slug}) from e

        if taken:
            raise ValidationError(
                message=f"A subject with slug '{slug}' already exists",
                field="slug",
            )


subject_service = SubjectService()
