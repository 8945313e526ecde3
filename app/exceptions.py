# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the caller HOW to fix the problem, not just WHAT failed.
#
# Status code conventions:
#   400 - the request itself is malformed (bad JSON, missing fields)
#   404 - unknown model type or batch session
#   409 - batch session already finalized
#   422 - reserved for "the record(s) failed validation"
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ValidatorServiceException(Exception):
    """
    Base exception for the validation service.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "VALIDATOR_SERVICE_ERROR",
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
# Model Registry Exceptions
# =============================================================================

class ModelNotFoundError(ValidatorServiceException):
    """Raised when a model type is not registered."""

    def __init__(self, model_type: str):
        super().__init__(
            message=f"Model type not found: {model_type}",
            code="MODEL_NOT_FOUND",
            status_code=404,
            suggestion="Use GET /models to list the registered model types",
            details={"model_type": model_type}
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class BadPayloadError(ValidatorServiceException):
    """Raised when a request body cannot be decoded into a record."""

    def __init__(self, error: str, model_type: str | None = None):
        details: dict[str, Any] = {"error": error}
        if model_type:
            details["model_type"] = model_type
        super().__init__(
            message="Invalid JSON payload",
            code="BAD_PAYLOAD",
            status_code=400,
            suggestion="Send a JSON object in the request body with Content-Type: application/json",
            details=details
        )


class InvalidRequestError(ValidatorServiceException):
    """Raised when a request is well-formed JSON but missing required parts."""

    def __init__(self, message: str, suggestion: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_REQUEST",
            status_code=400,
            suggestion=suggestion,
            details=details
        )


# =============================================================================
# Batch Session Exceptions
# =============================================================================

class BatchNotFoundError(ValidatorServiceException):
    """Raised when a batch ID doesn't exist (never started, completed or expired)."""

    def __init__(self, batch_id: str):
        super().__init__(
            message=f"Batch session not found: {batch_id}",
            code="BATCH_NOT_FOUND",
            status_code=404,
            suggestion="Start a new batch with POST /validate/batch/start; idle batches expire automatically",
            details={"batch_id": batch_id}
        )


class BatchFinalizedError(ValidatorServiceException):
    """Raised when records are submitted to a batch that was already completed."""

    def __init__(self, batch_id: str):
        super().__init__(
            message=f"Batch session already completed: {batch_id}",
            code="BATCH_FINALIZED",
            status_code=409,
            suggestion="Start a new batch to submit more records",
            details={"batch_id": batch_id}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def validator_service_exception_handler(
    request: Request,
    exc: ValidatorServiceException
) -> JSONResponse:
    """
    Convert ValidatorServiceException to JSON response.

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


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request-body schema errors.

    These are reported as 400 INVALID_REQUEST, because 422 is reserved
    for records that failed validation.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request body",
            "code": "INVALID_REQUEST",
            "errors": [
                {
                    "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                    "message": error.get("msg", ""),
                }
                for error in exc.errors()
            ],
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the traceback, return a generic 500."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "code": "INTERNAL_ERROR",
        }
    )
