"""
StudyHub Backend — Subject SQLAlchemy Model
============================================

What:  ORM model representing the `subjects` table.
Who:   Used by SubjectService for CRUD and by ResourceService for the
       denormalized resource_count; read by Alembic for migrations.

Table Design:
    - UUID primary key, generated in Python so it is known after flush
    - slug: unique, URL-safe key used by GET /api/subjects/{slug}
    - resource_count: number of resources whose `subject` equals this
      subject's name; maintained incrementally, never recomputed on read
    - created_at / updated_at: UTC, store-managed
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from studyhub.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subject(Base):
    """
    A topical category grouping resources (e.g. "Biology").

    Resources reference a subject by name, not by key, so renaming a
    subject does not carry its resources along.
    """

    __tablename__ = "subjects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    # Emoji or icon name shown on the subject card
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)

    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    resource_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("resource_count >= 0", name="ck_subjects_resource_count_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Subject(id={self.id}, slug='{self.slug}', resource_count={self.resource_count})>"
