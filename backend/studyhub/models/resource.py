"""
StudyHub Backend — Resource SQLAlchemy Model
=============================================

What:  ORM model representing the `resources` table (notes, past papers,
       videos, textbooks, quizzes).
Who:   Used by ResourceService and StatsService; read by Alembic.

Table Design:
    - subject: plain subject NAME, not a foreign key. Subjects and resources
      can be created in any order and deleting a subject leaves its
      resources untouched.
    - type: free text. RESOURCE_TYPES lists the values the frontend knows
      about; the database does not enforce them.
    - views / downloads: counters only ever changed through atomic
      `col = col + 1` updates in ResourceService

    Index on created_at DESC:
        Listing is always newest first.
"""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from studyhub.database import Base
from studyhub.models.subject import utcnow

RESOURCE_TYPES = ("past-papers", "notes", "videos", "textbooks", "quizzes")


class Resource(Base):
    """A downloadable or viewable learning asset tagged with a subject name and type."""

    __tablename__ = "resources"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    subject: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    type: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    link: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # Human-readable size as entered, e.g. "2.4 MB"
    file_size: Mapped[str | None] = mapped_column(String(50), nullable=True)

    year: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    downloads: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    views: Mapped[int] = mapped_column(
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
        Index("idx_resources_created_at", created_at.desc()),
        CheckConstraint("downloads >= 0", name="ck_resources_downloads_non_negative"),
        CheckConstraint("views >= 0", name="ck_resources_views_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<Resource(id={self.id}, subject='{self.subject}', type='{self.type}', "
            f"views={self.views}, downloads={self.downloads})>"
        )
