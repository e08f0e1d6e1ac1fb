"""
Realty CRM API - Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for each failure kind.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the JSON error body for the matching HTTP status.
Who:   Raised by gates, services and routes; caught by global handlers.
When:  During request processing, whenever a stage must halt the pipeline.

Exception Hierarchy:
    CRMError (base)
    ├── ValidationError        → 400 {"error": ..., "details": [...]}
    ├── UnauthenticatedError   → 401 {"message": "Unauthorized"}
    ├── ForbiddenError         → 403 {"message": "Forbidden"}
    ├── NotFoundError          → 404 {"error": "<Resource> not found"}
    └── DatabaseError          → 500 {"error": "Internal server error"}

`context` is logged server-side only; it never reaches a response body.
"""

from typing import Any, Dict, List, Optional, Sequence


class CRMError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Description that is safe to return in an API response
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


class ValidationError(CRMError):
    """
    Raised when a request body or query string fails its schema.

    What:    The client sent input that can be corrected.
    HTTP:    400 Bad Request

    `details` is a list of per-field violations, each shaped as
    {"field": "firstName", "message": "Field required", "type": "missing"}.

    Example response:
        {
            "error": "Validation failed",
            "details": [{"field": "email", "message": "value is not a valid email address", ...}]
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Sequence[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details: List[Dict[str, Any]] = list(details or [])


class UnauthenticatedError(CRMError):
    """
    Raised when the caller's credential is missing or cannot be verified.

    HTTP:    401 Unauthorized, with `WWW-Authenticate: Bearer`
    When:    No Authorization header, wrong scheme, bad signature, expired
             token, token without a subject, or a role check that finds no
             identity on the request.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(CRMError):
    """
    Raised when an authenticated caller holds none of the required roles.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CRMError):
    """
    Raised when an id-addressed operation matches no row owned by the caller.

    What:    The row is missing, belongs to another user, or the id is malformed.
    HTTP:    404 Not Found, body {"error": "<Resource> not found"}

    SQLAlchemy reports a missing row as `None` (scalar_one_or_none) or as
    `NoResultFound` (scalar_one). Services convert both into this exception.
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


class DatabaseError(CRMError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, update or delete failed for a reason other than
             a missing row (connection lost, constraint violation, deadlock).
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Detailed error info
    (SQL, constraint names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
