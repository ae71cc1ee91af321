"""
Unit tests for Exception classes.

This module contains unit tests for the application exception hierarchy and
the project-specific exceptions built on it.
"""

from fastapi import HTTPException, status

from app.exceptions.base import (
    BaseAppException,
    ConcurrencyConflictError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.exceptions.project import (
    DuplicateReferenceError,
    DuplicateUsageError,
    MultiplePrimaryError,
    ProjectNotFoundError,
    UsageNotFoundError,
)


class TestBaseAppException:
    """Test cases for BaseAppException."""

    def test_base_exception_default_values(self):
        exc = BaseAppException("Test error")

        assert exc.message == "Test error"
        assert exc.status_code == 500
        assert exc.error_code == "INTERNAL_ERROR"
        assert exc.details == {}
        assert exc.detail == {"message": "Test error", "error_code": "INTERNAL_ERROR", "details": {}}

    def test_base_exception_custom_values(self):
        details = {"field": "name"}
        exc = BaseAppException(
            message="Custom error", status_code=400, error_code="CUSTOM_ERROR", details=details
        )

        assert exc.status_code == 400
        assert exc.detail["error_code"] == "CUSTOM_ERROR"
        assert exc.detail["details"] == details

    def test_base_exception_inheritance(self):
        assert isinstance(BaseAppException("Test error"), HTTPException)

    def test_str_is_the_message(self):
        assert str(BaseAppException("Something broke")) == "Something broke"


class TestErrorKinds:
    """Each error kind maps to one HTTP status."""

    def test_not_found_error(self):
        exc = NotFoundError("Yarn")

        assert exc.message == "Yarn not found"
        assert exc.resource == "Yarn"
        assert exc.status_code == status.HTTP_404_NOT_FOUND
        assert exc.error_code == "NOT_FOUND"

    def test_not_found_default_resource(self):
        assert NotFoundError().message == "Resource not found"

    def test_validation_error(self):
        exc = ValidationError("Bad input", details={"field": "quantity_used"})

        assert exc.status_code == status.HTTP_400_BAD_REQUEST
        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details == {"field": "quantity_used"}

    def test_conflict_error(self):
        exc = ConflictError("Already there")

        assert exc.status_code == status.HTTP_409_CONFLICT
        assert exc.error_code == "CONFLICT"

    def test_concurrency_conflict_is_retryable(self):
        exc = ConcurrencyConflictError(details={"project_id": "abc"})

        assert exc.status_code == status.HTTP_409_CONFLICT
        assert exc.error_code == "CONCURRENT_MODIFICATION"
        assert exc.details == {"retryable": True, "project_id": "abc"}


class TestProjectExceptions:
    """Test cases for project aggregate exceptions."""

    def test_project_not_found(self):
        exc = ProjectNotFoundError()

        assert exc.message == "Project not found"
        assert isinstance(exc, NotFoundError)

    def test_usage_not_found(self):
        exc = UsageNotFoundError("Needle")

        assert exc.message == "Needle usage not found"
        assert exc.status_code == 404

    def test_duplicate_usage_is_conflict(self):
        exc = DuplicateUsageError("Yarn")

        assert exc.message == "Yarn already added to this project"
        assert exc.status_code == 409
        assert exc.details == {"kind": "yarn"}

    def test_duplicate_reference_is_validation(self):
        exc = DuplicateReferenceError("hook")

        assert exc.message == "Cannot add the same hook multiple times to a project"
        assert isinstance(exc, ValidationError)

    def test_multiple_primary_is_validation(self):
        exc = MultiplePrimaryError("yarn")

        assert exc.message == "Only one yarn can be marked as primary"
        assert exc.status_code == 400
