"""
StudyHub Backend — Resource Schemas
====================================

What:  Request bodies and response envelopes for /api/resources.
Who:   routes/resources.py and ResourceService.

`views` and `downloads` are response-only: they change exclusively through
GET /api/resources/{id} and POST /api/resources/{id}/download.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from studyhub.schemas.common import CamelModel

# Academic year range accepted for `year`; also keeps values inside a 32-bit INTEGER
YEAR_MIN = 1900
YEAR_MAX = 2100


class ResourceCreate(CamelModel):
    """Body of POST /api/resources. Only `name` is required."""
    name: str = Field(min_length=1, max_length=255)
    subject: Optional[str] = Field(default=None, max_length=255)
    type: Optional[str] = Field(
        default=None,
        max_length=50,
        description="past-papers, notes, videos, textbooks or quizzes (not enforced)",
    )
    description: Optional[str] = None
    link: Optional[str] = Field(default=None, max_length=2048)
    file_size: Optional[str] = Field(default=None, max_length=50)
    year: Optional[int] = Field(default=None, ge=YEAR_MIN, le=YEAR_MAX)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class ResourceUpdate(CamelModel):
    """Body of PUT /api/resources/{id}. Partial: unset keys are left untouched."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    subject: Optional[str] = Field(default=None, max_length=255)
    type: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    link: Optional[str] = Field(default=None, max_length=2048)
    file_size: Optional[str] = Field(default=None, max_length=50)
    year: Optional[int] = Field(default=None, ge=YEAR_MIN, le=YEAR_MAX)

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("name must not be null or blank")
        return v.strip()


class ResourceResponse(CamelModel):
    id: uuid.UUID
    name: str
    subject: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    file_size: Optional[str] = None
    year: Optional[int] = None
    downloads: int = Field(ge=0)
    views: int = Field(ge=0)
    created_at: datetime
    updated_at: datetime


class ResourceEnvelope(CamelModel):
    success: bool = True
    resource: ResourceResponse


class ResourceListResponse(CamelModel):
    """
    Page of resources, newest first.

    count: items on this page
    total: items matching the filters across all pages
    pages: ceil(total / limit)
    """
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    resources: List[ResourceResponse]


class DownloadResponse(CamelModel):
    """Response of POST /api/resources/{id}/download."""
    success: bool = True
    downloads: int = Field(ge=0)
