"""
StudyHub Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn studyhub.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐ ┌──────┐ │
    │  │  Req ID  │→│  Logging        │→│ GZip │→│ CORS │ │
    │  └──────────┘ └─────────────────┘ └──────┘ └──────┘ │
    │                                                     │
    │  Routes:                                            │
    │  /api/health  /api/subjects  /api/resources         │
    │  /api/stats                                         │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ NotFound→404 │ DB/other→500       │
    │  Unhandled errors → UnhandledErrorMiddleware (500)  │
    └─────────────────────────────────────────────────────┘

Every error body has the shape {"success": false, "message": "..."}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studyhub import __version__
from studyhub.config import settings
from studyhub.database import dispose_engine
from studyhub.exceptions import (
    DatabaseError,
    NotFoundError,
    StudyHubError,
    ValidationError,
)
from studyhub.middleware.errors import UNEXPECTED_ERROR_MESSAGE, UnhandledErrorMiddleware
from studyhub.middleware.logging import RequestLoggingMiddleware
from studyhub.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from studyhub.routes import health, resources, stats, subjects

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Level:  settings.log_level (LOG_LEVEL)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and announce the listen address.
    Shutdown: dispose the database engine (closes pooled connections).

    The schema is managed by Alembic (`alembic upgrade head`), not here.
    """
    setup_logging()
    logger.info("StudyHub Backend %s starting up...", __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("StudyHub Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def format_validation_errors(exc: RequestValidationError) -> str:
    """
    Flattens FastAPI validation errors into one readable line.

    [{"loc": ("body", "name"), "msg": "Field required"}] → "name: Field required"
    """
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the JSON error envelope.

    Handler hierarchy:
        RequestValidationError  → 400 (missing/ill-typed fields or params)
        ValidationError         → 400
        NotFoundError           → 404 ("Subject not found", "Resource not found")
        HTTPException 404       → 404 "Route not found" (no route matched)
        HTTPException other     → its own status and detail (e.g. 405)
        DatabaseError           → 500, generic message
        StudyHubError (base)    → 500
        anything else           → 500 "Something went wrong!" (UnhandledErrorMiddleware;
                                  the Exception handler covers middleware failures)

    Stack traces and SQL never reach the client; they are logged with the
    request id.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        message = format_validation_errors(exc)
        logger.warning("[%s] Request validation failed: %s", rid, message)
        return error_response(400, message)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return error_response(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(404, "Route not found")
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, "An internal error occurred. Please try again later.")

    @app.exception_handler(StudyHubError)
    async def handle_app_error(request: Request, exc: StudyHubError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Only reached for failures inside the middleware chain itself, after
        # RequestIDMiddleware has reset request_id_var
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        headers = {REQUEST_ID_HEADER: rid} if rid else None
        return error_response(500, UNEXPECTED_ERROR_MESSAGE, headers=headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="StudyHub API",
        description="Catalogue of academic subjects and downloadable study resources.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → UnhandledError → route
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(subjects.router)
    app.include_router(resources.router)
    app.include_router(stats.router)

    return app


# uvicorn expects `studyhub.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "studyhub.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
