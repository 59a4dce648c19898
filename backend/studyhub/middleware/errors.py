"""
StudyHub Backend — Unhandled Error Middleware
==============================================

What:  Turns any exception that no exception handler claimed into the
       standard 500 envelope {"success": false, "message": "Something went wrong!"}.
How:   Registered innermost, so the 500 it produces still passes back out
       through CORS, the access log and RequestIDMiddleware. A handler
       registered for plain `Exception` would instead run in Starlette's
       ServerErrorMiddleware, outside all of them.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from studyhub.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong!"


class UnhandledErrorMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                str(exc),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": UNEXPECTED_ERROR_MESSAGE},
            )
