"""
StudyHub Backend — Subject Route Handlers
==========================================

What:  /api/subjects — list, fetch by slug, create, update, delete.
How:   Extracts query/path parameters, delegates to SubjectService and
       wraps results in the `{success, ...}` envelopes.

Lookup keys:
    GET uses the slug (/api/subjects/biology); PUT and DELETE use the id.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.database import commit_session, get_db_session
from studyhub.schemas.common import ErrorResponse, MessageResponse
from studyhub.schemas.subject import (
    SubjectCreate,
    SubjectEnvelope,
    SubjectListResponse,
    SubjectResponse,
    SubjectUpdate,
)
from studyhub.services.subject_service import subject_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/subjects", tags=["Subjects"])

_NOT_FOUND = {404: {"description": "Subject not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=SubjectListResponse,
    summary="List subjects",
    description="Subjects sorted by name. `category=all` or omitted disables the category filter.",
)
async def list_subjects(
    category: str | None = Query(default=None, description="Exact category, or 'all'"),
    search: str | None = Query(default=None, description="Case-insensitive substring of the name"),
    db: AsyncSession = Depends(get_db_session),
) -> SubjectListResponse:
    subjects = await subject_service.list_subjects(db, category=category, search=search)
    return SubjectListResponse(
        count=len(subjects),
        subjects=[SubjectResponse.model_validate(s) for s in subjects],
    )


@router.get(
    "/{slug}",
    response_model=SubjectEnvelope,
    responses=_NOT_FOUND,
    summary="Get a subject by slug",
)
async def get_subject(slug: str, db: AsyncSession = Depends(get_db_session)) -> SubjectEnvelope:
    subject = await subject_service.get_by_slug(db, slug)
    return SubjectEnvelope(subject=SubjectResponse.model_validate(subject))


@router.post(
    "",
    response_model=SubjectEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Missing name or duplicate slug", "model": ErrorResponse}},
    summary="Create a subject",
)
async def create_subject(
    payload: SubjectCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SubjectEnvelope:
    subject = await subject_service.create_subject(db, payload)
    await commit_session(db)
    return SubjectEnvelope(subject=SubjectResponse.model_validate(subject))


@router.put(
    "/{subject_id}",
    response_model=SubjectEnvelope,
    responses=_NOT_FOUND,
    summary="Partially update a subject",
    description="Only the keys present in the body are changed.",
)
async def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> SubjectEnvelope:
    subject = await subject_service.update_subject(db, subject_id, payload)
    await commit_session(db)
    return SubjectEnvelope(subject=SubjectResponse.model_validate(subject))


@router.delete(
    "/{subject_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a subject",
    description="Resources that name the subject are not deleted.",
)
async def delete_subject(
    subject_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await subject_service.delete_subject(db, subject_id)
    await commit_session(db)
    return MessageResponse(message="Subject deleted")
