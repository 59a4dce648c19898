"""
StudyHub Backend — Shared Pydantic Schemas
===========================================

What:  Base model and envelope types shared by every router.
How:   Field names are snake_case in Python and camelCase on the wire
       (`resource_count` ↔ `resourceCount`). Request bodies accept either.

Every response body carries a `success` flag; errors use ErrorResponse.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for all API schemas: camelCase aliases, ORM attribute loading."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Returned by DELETE endpoints."""
    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    """
    Standardized error body for all API errors.

    Example:
        {"success": false, "message": "Resource not found"}
    """
    success: bool = False
    message: str = Field(description="Human-readable error description")


class HealthResponse(CamelModel):
    """Returned by GET /api/health."""
    status: str = Field(description="OK when the process is serving requests")
    timestamp: datetime = Field(description="Server time (UTC)")
    database: str = Field(description="Database connectivity: connected, disconnected")


class Stats(CamelModel):
    subjects: int = Field(ge=0)
    resources: int = Field(ge=0)
    downloads: int = Field(ge=0)
    views: int = Field(ge=0)


class StatsResponse(CamelModel):
    """Returned by GET /api/stats."""
    success: bool = True
    stats: Stats
