"""
StudyHub Backend — Subject Schemas
===================================

What:  Request bodies and response envelopes for /api/subjects.
Who:   routes/subjects.py (HTTP contract) and SubjectService (input types).

`resourceCount` appears only in responses: the counter is owned by
ResourceService and clients cannot set it.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from studyhub.schemas.common import CamelModel


class SubjectCreate(CamelModel):
    """Body of POST /api/subjects. Only `name` is required; `slug` defaults from it."""
    name: str = Field(min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    icon: Optional[str] = Field(default=None, max_length=64)
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class SubjectUpdate(CamelModel):
    """
    Body of PUT /api/subjects/{id}.

    Partial update: only keys present in the body are written
    (see `model_dump(exclude_unset=True)` in SubjectService).
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    icon: Optional[str] = Field(default=None, max_length=64)
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None

    @field_validator("name", "slug")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        # Only runs for keys the client actually sent
        if v is None or not v.strip():
            raise ValueError("must not be null or blank")
        return v.strip()


class SubjectResponse(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    icon: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    resource_count: int = Field(ge=0)
    created_at: datetime
    updated_at: datetime


class SubjectEnvelope(CamelModel):
    """Single-subject response: GET by slug, POST, PUT."""
    success: bool = True
    subject: SubjectResponse


class SubjectListResponse(CamelModel):
    """Response of GET /api/subjects, sorted by name ascending."""
    success: bool = True
    count: int
    subjects: List[SubjectResponse]
