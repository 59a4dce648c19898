"""
StudyHub Backend — Resource Route Handlers
===========================================

What:  /api/resources — paginated list, fetch (counts a view), create,
       update, delete, and download tracking.
How:   Delegates to ResourceService; every mutation of a resource's subject
       is mirrored on Subject.resourceCount inside the service.

Caching:
    No Cache-Control on GET /api/resources/{id}: every fetch must reach the
    server to be counted as a view.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.config import settings
from studyhub.database import commit_session, get_db_session
from studyhub.schemas.common import ErrorResponse, MessageResponse
from studyhub.schemas.resource import (
    DownloadResponse,
    ResourceCreate,
    ResourceEnvelope,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdate,
    YEAR_MAX,
    YEAR_MIN,
)
from studyhub.services.resource_service import resource_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resources", tags=["Resources"])

_NOT_FOUND = {404: {"description": "Resource not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=ResourceListResponse,
    summary="List resources with pagination",
    description=(
        "Newest first. All filters are optional and combined with AND; `search` "
        "matches the name or the description."
    ),
)
async def list_resources(
    response: Response,
    subject: str | None = Query(default=None, description="Exact subject name"),
    type: str | None = Query(default=None, description="past-papers, notes, videos, textbooks, quizzes"),
    year: int | None = Query(default=None, ge=YEAR_MIN, le=YEAR_MAX, description="Exact year"),
    search: str | None = Query(default=None, description="Substring of name or description"),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> ResourceListResponse:
    result = await resource_service.list_resources(
        db,
        subject=subject,
        resource_type=type,
        year=year,
        search=search,
        page=page,
        limit=limit,
    )
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/{resource_id}",
    response_model=ResourceEnvelope,
    responses=_NOT_FOUND,
    summary="Get a resource (counts a view)",
)
async def get_resource(
    resource_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ResourceEnvelope:
    resource = await resource_service.get_resource(db, resource_id)
    await commit_session(db)
    return ResourceEnvelope(resource=ResourceResponse.model_validate(resource))


@router.post(
    "",
    response_model=ResourceEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Missing name", "model": ErrorResponse}},
    summary="Create a resource",
    description="Also adds one to the resourceCount of the subject with that name.",
)
async def create_resource(
    payload: ResourceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ResourceEnvelope:
    resource = await resource_service.create_resource(db, payload)
    await commit_session(db)
    return ResourceEnvelope(resource=ResourceResponse.model_validate(resource))


@router.put(
    "/{resource_id}",
    response_model=ResourceEnvelope,
    responses=_NOT_FOUND,
    summary="Partially update a resource",
)
async def update_resource(
    resource_id: str,
    payload: ResourceUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ResourceEnvelope:
    resource = await resource_service.update_resource(db, resource_id, payload)
    await commit_session(db)
    return ResourceEnvelope(resource=ResourceResponse.model_validate(resource))


@router.delete(
    "/{resource_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a resource",
    description="Also subtracts one from the resourceCount of its subject.",
)
async def delete_resource(
    resource_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await resource_service.delete_resource(db, resource_id)
    await commit_session(db)
    return MessageResponse(message="Resource deleted")


@router.post(
    "/{resource_id}/download",
    response_model=DownloadResponse,
    responses=_NOT_FOUND,
    summary="Track a download",
    description="Adds one to the download counter and returns the new value.",
)
async def track_download(
    resource_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DownloadResponse:
    downloads = await resource_service.record_download(db, resource_id)
    await commit_session(db)
    return DownloadResponse(downloads=downloads)
