# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error body carries "ok": false so clients can branch on one field,
# plus a machine-readable code and, where useful, how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ResourcePortalException(Exception):
    """
    Base exception for the Resource Portal API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "RESOURCE_PORTAL_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "ok": False,
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authentication / Authorization Exceptions
# =============================================================================

class AuthenticationRequiredError(ResourcePortalException):
    """Raised when a request needs a valid bearer credential and has none."""

    def __init__(self, message: str = "login required"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
            suggestion="Sign in and send the access token as 'Authorization: Bearer <token>'",
        )


class ForbiddenError(ResourcePortalException):
    """Raised when the viewer is authenticated but lacks role or approval."""

    def __init__(self, message: str = "forbidden"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


# =============================================================================
# Resource Exceptions
# =============================================================================

class ResourceNotFoundError(ResourcePortalException):
    """Raised when a resource id doesn't exist or the resource was deleted."""

    def __init__(self, resource_id: int | None = None, message: str = "resource not found"):
        super().__init__(
            message=message,
            code="RESOURCE_NOT_FOUND",
            status_code=404,
            details={"resource_id": resource_id} if resource_id is not None else None,
        )


class ResourceDeletedError(ResourcePortalException):
    """Raised when trying to modify a soft-deleted resource."""

    def __init__(self, resource_id: int):
        super().__init__(
            message="resource is deleted",
            code="RESOURCE_DELETED",
            status_code=400,
            suggestion="Deleted resources are kept for audit only; upload a new resource instead",
            details={"resource_id": resource_id},
        )


class RequestValidationFailed(ResourcePortalException):
    """Raised when a required field is missing or a field value is invalid."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            details={"field": field} if field else None,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class UnsupportedFileTypeError(ResourcePortalException):
    """Raised when the kind of an uploaded file can't be inferred from its name."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message="unsupported file type",
            code="UNSUPPORTED_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these extensions are supported: {', '.join(allowed)}",
            details={"filename": filename},
        )


class FileTooLargeError(ResourcePortalException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class KindMismatchError(ResourcePortalException):
    """Raised when a replacement file would change the kind of a resource."""

    def __init__(self, current: str, new: str):
        super().__init__(
            message=f"kind mismatch (current={current}, new={new})",
            code="KIND_MISMATCH",
            status_code=400,
            suggestion="Replace the file with one of the same kind, or upload a new resource",
            details={"current": current, "new": new},
        )


class StorageUploadError(ResourcePortalException):
    """Raised when writing an object to storage fails."""

    def __init__(self, key: str, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"key": key},
        )


class StorageUrlError(ResourcePortalException):
    """Raised when the storage service can't produce a URL for an object."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to create file URL: {error}",
            code="STORAGE_URL_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def resource_portal_exception_handler(
    request: Request,
    exc: ResourcePortalException
) -> JSONResponse:
    """
    Convert ResourcePortalException to JSON response.

    Returns structured error with:
    - ok: always false
    - error: Human-readable message
    - code: Machine-readable error code
    - suggestion / details when available
    """
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic request validation errors.

    Malformed bodies and bad enum values are client errors (400).
    """
    return JSONResponse(
        status_code=400,
        content={
            "ok": False,
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc),
        }
    )
