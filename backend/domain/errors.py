"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes by the global exception handler
in main.py.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict | None = None,
        extra: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}
        # Top-level fields merged into the error envelope (e.g. hasAccess)
        self.extra = extra or {}


class NotFoundError(DomainError):
    """Resource not found (404)."""
    def __init__(self, resource_type: str, identifier: str, details: dict | None = None):
        message = f"{resource_type} not found: {identifier}"
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class FormValidationError(DomainError):
    """Book form rejected (422); details map each field to its message."""
    def __init__(self, errors: dict[str, str]):
        super().__init__(
            "Book form has invalid fields",
            status_code=422,
            details={"fields": errors},
        )
        self.errors = errors


class PermissionDeniedError(DomainError):
    """Permission denied (403)."""
    def __init__(self, message: str = "Permission denied", details: dict | None = None, extra: dict | None = None):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, details=details, extra=extra)


class AccessDeniedError(PermissionDeniedError):
    """No qualifying order for the requested book (403)."""
    def __init__(self, message: str, book_id: str):
        super().__init__(message, details={"bookId": book_id}, extra={"hasAccess": False})


class UnauthorizedError(DomainError):
    """Unauthorized access (401)."""
    def __init__(self, message: str = "Unauthorized", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, details=details)


class ConflictError(DomainError):
    """Resource conflict (409)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_409_CONFLICT, details=details)


class MalformedContentError(DomainError):
    """
    Catalog record is inconsistent with its declared content type (500).

    A data-integrity problem, not a client error. The message names the
    missing locator for server logs; callers show a generic message instead.
    """
    def __init__(self, book_id: str, content_type: str, missing_field: str):
        message = f"Book {book_id} declares {content_type} content without {missing_field}"
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.book_id = book_id
        self.content_type = content_type
        self.missing_field = missing_field


class TransientError(DomainError):
    """Underlying data access failed; safe to retry (503)."""
    def __init__(self, message: str = "Storage temporarily unavailable", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, details=details)
