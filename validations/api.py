# =============================================================================
# validations/api.py - API Request Validator
# =============================================================================

from core.models.validation import FieldError, FieldWarning
from payloads.api import APIRequest
from validations.base import BaseValidator

BODYLESS_METHODS = ("GET", "HEAD", "OPTIONS")
HIGH_RETRY_COUNT = 5


class APIValidator(BaseValidator):
    """Validates captured HTTP API requests."""

    shape = APIRequest
    model_type = "api"

    def check_rules(self, record: APIRequest) -> list[FieldError]:
        errors = []

        if record.method in BODYLESS_METHODS and record.body not in (None, "", {}, []):
            errors.append(FieldError(
                field="body",
                message=f"{record.method} requests must not carry a body",
                code="UNEXPECTED_BODY",
                value=record.method,
            ))

        return errors

    def check_warnings(self, record: APIRequest) -> list[FieldWarning]:
        warnings = []

        if record.url.startswith("http://"):
            warnings.append(FieldWarning(
                field="url",
                message="Request uses plain HTTP",
                code="INSECURE_URL",
                suggestion="Use HTTPS for API traffic",
            ))

        if record.authorization is None and record.method not in BODYLESS_METHODS:
            warnings.append(FieldWarning(
                field="authorization",
                message=f"Unauthenticated {record.method} request",
                code="MISSING_AUTHORIZATION",
                suggestion="Send credentials with state-changing requests",
            ))

        if record.retry_count > HIGH_RETRY_COUNT:
            warnings.append(FieldWarning(
                field="retry_count",
                message=f"Request was retried {record.retry_count} times",
                code="HIGH_RETRY_COUNT",
                suggestion="Investigate upstream failures before retrying further",
            ))

        if record.body not in (None, "", {}, []) and not record.content_type:
            warnings.append(FieldWarning(
                field="content_type",
                message="Request has a body but no content type",
                code="MISSING_CONTENT_TYPE",
                suggestion="Set content_type, e.g. application/json",
            ))

        return warnings
