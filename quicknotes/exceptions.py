"""
QuickNotes Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different error scenarios.
Why:   Targeted handling with the right HTTP status code, without leaking
       internal details to API consumers.
How:   Each exception carries a message and an optional context dict.
       Global handlers (registered in main.py) turn them into JSON responses.
Who:   Raised by services and the HTTP client; caught by global handlers
       or by the UI page state objects.

Exception Hierarchy:
    QuickNotesError (base)
    ├── NotFoundError    → 404 Not Found
    ├── DatabaseError    → 500 Internal Server Error
    └── NotesApiError    → client side: non-2xx response or transport failure
"""

from typing import Any, Dict, Optional


class QuickNotesError(Exception):
    """
    Base exception for all QuickNotes application errors.

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


class NotFoundError(QuickNotesError):
    """
    Raised when a requested note does not exist.

    When:    GET /api/notes/{id} with an unknown id, or an update whose
             re-read finds no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; the service layer converts
    that None into this exception. The HTTP client raises it again on a 404
    so callers see the same condition on both sides of the wire.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(QuickNotesError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The SQL error
    is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotesApiError(QuickNotesError):
    """
    Raised by NotesClient for any failure other than NotFound.

    Covers non-2xx responses (validation 422, server 500, rate limit 429)
    and transport errors (status_code is None then).
    """

    def __init__(
        self,
        message: str = "Request to the notes API failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
