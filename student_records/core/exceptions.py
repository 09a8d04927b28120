"""Custom exception classes and error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception.

    Carries its HTTP status and the response envelope sent to the client.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        self.code = code
        self.message = message
        self.errors = errors or []
        detail: dict[str, Any] = {"success": False, "error": message}
        if errors:
            detail["errors"] = errors
        super().__init__(status_code=status_code, detail=detail)

    def __str__(self) -> str:
        return self.message


class ValidationFailedError(AppException):
    """One or more fields failed validation."""

    def __init__(
        self,
        errors: list[dict[str, Any]],
        message: str = "Validation failed",
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="VALIDATION_FAILED",
            message=message,
            errors=errors,
        )


class InvalidIdError(AppException):
    """Path identifier is not a positive integer."""

    def __init__(self, resource: str = "Student"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_ID",
            message=f"Invalid {resource.lower()} ID",
        )


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str = "Resource",
        identifier: str | None = None,
    ):
        self.identifier = identifier
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="NOT_FOUND",
            message=f"{resource} not found",
        )


class ConflictError(AppException):
    """Resource conflicts with an existing one."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="CONFLICT",
            message=message,
        )
