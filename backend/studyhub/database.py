"""
StudyHub Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling and provides a session
       dependency that rolls back on error; routes commit with commit_session().
Who:   Route handlers receive the session via Depends(get_db_session) and pass
       it explicitly to every service call. The session is the store handle;
       services hold no connection state of their own.
When:  Engine is created at module import; sessions are created per-request.

Transaction scope:
    One request == one transaction. A Resource insert/delete and the matching
    Subject.resource_count adjustment are flushed in the same session and
    committed together by commit_session() before the response is built, so
    either both land or neither does.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from studyhub.config import settings
from studyhub.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Pool options for the configured backend. SQLite drivers reject pool sizing."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay loaded after commit, so responses
# can be serialized once the dependency has committed.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On error: rolls back and re-raises for the global error handlers
        4. Always: closes the session (returns connection to pool)

    The dependency does not commit. Code after `yield` runs once the
    response has already been sent, so a failed commit there could no
    longer change the status the client sees. Routes that write call
    commit_session() before building their response; anything left
    uncommitted is discarded by close().

    Example usage in a route:
        @router.post("/subjects", status_code=201)
        async def create_subject(payload: SubjectCreate, db: AsyncSession = Depends(get_db_session)):
            subject = await subject_service.create_subject(db, payload)
            await commit_session(db)
            return SubjectEnvelope(subject=SubjectResponse.model_validate(subject))
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def commit_session(db: AsyncSession) -> None:
    """
    Commit the request's transaction.

    Raises:
        DatabaseError: The commit failed; the transaction is rolled back (→ 500)
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error("Database error committing transaction: %s", str(e), exc_info=True)
        await db.rollback()
        raise DatabaseError(
            message="Could not save changes. Please try again.",
            context={"error_type": type(e).__name__},
        ) from e


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the application lifespan on shutdown."""
    await engine.dispose()
