# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a
# suggestion telling the caller how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class MediaCMSException(Exception):
    """
    Base exception for the MediaCMS API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MEDIACMS_ERROR",
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
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Tenant Exceptions
# =============================================================================

class TenantRequiredError(MediaCMSException):
    """Raised when a tenant-scoped endpoint is called without X-Media-Id."""

    def __init__(self):
        super().__init__(
            message="No media tenant selected",
            code="TENANT_REQUIRED",
            status_code=400,
            suggestion="Send the tenant id in the X-Media-Id header",
        )


class TenantNotFoundError(MediaCMSException):
    """Raised when a tenant ID doesn't exist (or is inactive on public routes)."""

    def __init__(self, media_id: str):
        super().__init__(
            message=f"Media tenant not found: {media_id}",
            code="TENANT_NOT_FOUND",
            status_code=404,
            suggestion="Check the X-Media-Id header or resolve the tenant via /domain-to-media-id",
            details={"media_id": media_id}
        )


class TenantAccessDeniedError(MediaCMSException):
    """Raised when the caller is not a member of the requested tenant."""

    def __init__(self, media_id: str):
        super().__init__(
            message=f"You do not have access to media tenant: {media_id}",
            code="TENANT_ACCESS_DENIED",
            status_code=403,
            suggestion="Ask the tenant owner to add you as a member",
            details={"media_id": media_id}
        )


class SuperAdminRequiredError(MediaCMSException):
    """Raised when a super admin only operation is called by another user."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Only super admins can manage {operation}",
            code="SUPER_ADMIN_REQUIRED",
            status_code=403,
            details={"operation": operation}
        )


# =============================================================================
# Resource Exceptions
# =============================================================================

class ResourceNotFoundError(MediaCMSException):
    """Raised when an article, category, tag, writer... doesn't exist in the tenant."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource.capitalize()} not found: {resource_id}",
            code=f"{resource.upper()}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource} id is correct and belongs to the selected tenant",
            details={f"{resource}_id": resource_id}
        )


class ValidationFailedError(MediaCMSException):
    """Raised when a request passes schema validation but breaks a business rule."""

    def __init__(self, message: str, suggestion: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


class DuplicateSlugError(MediaCMSException):
    """Raised when a slug is already used by another record in the tenant."""

    def __init__(self, resource: str, slug: str):
        super().__init__(
            message=f"A {resource} with slug '{slug}' already exists",
            code="DUPLICATE_SLUG",
            status_code=409,
            suggestion="Choose a different slug or use the generate-slug endpoint",
            details={"resource": resource, "slug": slug}
        )


class DuplicateDomainError(MediaCMSException):
    """Raised when a custom domain is already bound to another tenant."""

    def __init__(self, domain: str):
        super().__init__(
            message=f"Custom domain already in use: {domain}",
            code="DUPLICATE_DOMAIN",
            status_code=409,
            suggestion="Remove the domain from the other tenant first",
            details={"custom_domain": domain}
        )


class UnsupportedLanguageError(MediaCMSException):
    """Raised when a language code is not one of the supported languages."""

    def __init__(self, lang: str, supported: list[str]):
        super().__init__(
            message=f"Unsupported language: {lang}",
            code="UNSUPPORTED_LANGUAGE",
            status_code=400,
            suggestion=f"Use one of: {', '.join(supported)}",
            details={"lang": lang, "supported_langs": supported}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidMediaTypeError(MediaCMSException):
    """Raised when an uploaded file is neither an image nor a video."""

    def __init__(self, filename: str, content_type: str | None):
        super().__init__(
            message=f"Unsupported file type: {filename}",
            code="INVALID_MEDIA_TYPE",
            status_code=400,
            suggestion="Upload an image (image/*) or a video (video/*)",
            details={"filename": filename, "content_type": content_type}
        )


class FileTooLargeError(MediaCMSException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(MediaCMSException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# LLM / Search Exceptions
# =============================================================================

class TranslationError(MediaCMSException):
    """Raised when the LLM translation call fails."""

    def __init__(self, target_lang: str, error: str):
        super().__init__(
            message=f"Translation to '{target_lang}' failed: {error}",
            code="TRANSLATION_FAILED",
            status_code=502,
            suggestion="Check your OPENAI_API_KEY and retry",
            details={"target_lang": target_lang}
        )


class GenerationError(MediaCMSException):
    """Raised when content generation cannot produce a usable result."""

    def __init__(self, step: str, error: str):
        super().__init__(
            message=f"Content generation failed at '{step}': {error}",
            code="GENERATION_FAILED",
            status_code=502,
            suggestion="Retry the request; if it keeps failing check the model configuration",
            details={"step": step}
        )


class SearchSyncError(MediaCMSException):
    """Raised when the search index cannot be reached for a bulk operation."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Search index operation failed: {error}",
            code="SEARCH_SYNC_FAILED",
            status_code=502,
            suggestion="Check ELASTICSEARCH_URL and that the cluster is reachable",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def mediacms_exception_handler(
    request: Request,
    exc: MediaCMSException
) -> JSONResponse:
    """
    Convert MediaCMSException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()) if hasattr(exc, "errors") else str(exc)
        }
    )


async def backing_service_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle errors raised by the database, search and LLM wrappers.

    They carry code/message/suggestion/details like MediaCMSException but
    live in lib/ and agents/, so they map to 502 here.
    """
    content: dict[str, Any] = {
        "detail": getattr(exc, "message", str(exc)),
        "code": getattr(exc, "code", "BACKING_SERVICE_ERROR"),
    }
    if getattr(exc, "suggestion", None):
        content["suggestion"] = exc.suggestion
    if getattr(exc, "details", None):
        content["details"] = exc.details
    return JSONResponse(status_code=502, content=content)
