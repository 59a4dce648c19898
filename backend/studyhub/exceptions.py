"""
StudyHub Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error cases the API reports.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"success": false, "message": ...}` with the right status code.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    StudyHubError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class StudyHubError(Exception):
    """
    Base exception for all StudyHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StudyHubError):
    """
    Raised when client input fails a business rule.

    Schema-level problems (missing `name`, non-integer `year`) are caught
    earlier by FastAPI and mapped to the same 400 response in main.py.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(StudyHubError):
    """
    Raised when a requested subject or resource does not exist.

    The message is the one clients see, e.g. "Subject not found".
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(StudyHubError):
    """
    Raised when a database query, insert, or update fails unexpectedly.

    The message returned to the client is always generic; the driver error
    is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
