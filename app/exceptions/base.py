# ruff: noqa: D107
"""Base exception classes."""

from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={"message": message, "error_code": error_code, "details": self.details},
        )

    def __str__(self) -> str:
        return self.message


class NotFoundError(BaseAppException):
    """Exception raised when a resource is not found.

    ``resource`` names the missing thing ("Project", "Yarn usage"); the
    message becomes "<resource> not found".
    """

    def __init__(
        self,
        resource: str = "Resource",
        details: dict[str, Any] | None = None,
    ):
        self.resource = resource
        super().__init__(
            message=f"{resource} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


class ValidationError(BaseAppException):
    """Exception raised when a business rule rejects the input."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(BaseAppException):
    """Exception raised when the request collides with existing state."""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details,
        )


class ConcurrencyConflictError(BaseAppException):
    """Exception raised when a concurrent write changed the record first.

    The caller may repeat the whole request.
    """

    def __init__(
        self,
        message: str = "The resource was modified concurrently, please retry",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONCURRENT_MODIFICATION",
            details={"retryable": True, **(details or {})},
        )
