"""
Error taxonomy for Library Desk.

Workflows and repositories raise these; the API layer translates them
into form messages, HTML error pages or JSON error bodies.
"""

from typing import Optional


class LibraryError(Exception):
    """Base exception for Library Desk errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ValidationError(LibraryError):
    """
    Bad or mismatched input.

    ``field`` names the part of the form the message belongs to
    ("details" or "quantity" on the inventory forms).
    """

    def __init__(self, message: str, field: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )
        self.field = field


class NotFoundError(LibraryError):
    """Missing ISBN or email."""

    def __init__(self, message: str, resource: Optional[str] = None, identifier: Optional[str] = None):
        detail = None
        if resource and identifier:
            detail = f"No {resource} with identifier '{identifier}' exists"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            detail=detail,
        )


class AuthError(LibraryError):
    """Credentials did not verify."""

    def __init__(self, message: str = "Incorrect password."):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401,
        )


class ConflictError(LibraryError):
    """Unique constraint hit (duplicate email)."""

    def __init__(self, message: str = "Could not create user.", detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            detail=detail,
        )


class StoreError(LibraryError):
    """
    The relational store failed.

    ``detail`` carries the driver message for the log only; it is never
    rendered to the user.
    """

    def __init__(self, operation: str, detail: Optional[str] = None):
        super().__init__(
            message="An unexpected error occurred. Please try again later.",
            code="STORE_ERROR",
            status_code=500,
            detail=detail,
        )
        self.operation = operation


class ForbiddenError(LibraryError):
    """Session lacks the role an operation requires."""

    def __init__(self, required_role: str):
        super().__init__(
            message="Forbidden",
            code="FORBIDDEN",
            status_code=403,
            detail=f"Role '{required_role}' required",
        )
        self.required_role = required_role
