"""
HISS Backend — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the failure modes of the API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by routes, services and repositories.

Exception Hierarchy:
    HissError (base)
    ├── BadRequestError          → 400 Bad Request (unknown feature kind, missing id)
    ├── NotFoundError            → 404 Not Found (update/delete of a missing row)
    └── StoreError               → 500 Internal Server Error
        └── StoreUnavailableError → 503 Service Unavailable (pool exhausted)

Vocabulary failures are NOT exceptions: the save workflow returns them as a
field → message mapping inside a 200 response, which is what existing
annotation clients expect.
"""

from typing import Any, Dict, Optional


class HissError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where noted)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(HissError):
    """
    Raised when the request cannot be dispatched.

    When:  A `{kind}` path segment outside stroke/angio/degenerative, or an
           update payload without the record identifier.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Bad request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(HissError):
    """
    Raised when an update or delete matched no row.

    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(HissError):
    """
    Raised when a database operation fails.

    When:  Constraint violation, lost connection, statement timeout, etc.
    HTTP:  500 Internal Server Error

    The client only ever sees a generic message; the context (operation,
    original exception type) is logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(StoreError):
    """
    Raised when no pooled connection became free within db_pool_timeout.

    HTTP:  503 Service Unavailable, with Retry-After
    """

    def __init__(
        self,
        retry_after: int = 5,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            "The database is busy. "
            f"Please retry in approximately {retry_after} seconds."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
