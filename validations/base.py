# =============================================================================
# validations/base.py - Shared Validator Behaviour
# =============================================================================
# Every bundled validator pairs a data shape (a pydantic model in payloads/)
# with business rules. BaseValidator does the common part:
#
#   1. Re-validate the decoded record against its shape with pydantic
#      (field rules: required, lengths, enums, ranges, formats)
#   2. If the fields are sound, run the validator's custom error rules
#   3. Collect business-rule warnings (never affect validity)
#
# pydantic error types are mapped to stable error codes so clients can
# switch on `code` without parsing messages.
#
# Subclasses implement:
#   shape           - the pydantic model class
#   model_type      - registered type name
#   check_rules()   - extra errors on a typed, field-valid record
#   check_warnings() - business warnings on a typed, field-valid record
# =============================================================================

from __future__ import annotations

import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from core.models.validation import FieldError, FieldWarning, ValidationResult
from lib.utils import elapsed_ms, utc_now

PROVIDER = "pydantic"

# -----------------------------------------------------------------------------
# Error codes
# -----------------------------------------------------------------------------
ERR_VALIDATION_FAILED = "VALIDATION_FAILED"
ERR_REQUIRED_MISSING = "REQUIRED_FIELD_MISSING"
ERR_VALUE_TOO_SHORT = "VALUE_TOO_SHORT"
ERR_VALUE_TOO_LONG = "VALUE_TOO_LONG"
ERR_OUT_OF_RANGE = "VALUE_OUT_OF_RANGE"
ERR_INVALID_FORMAT = "INVALID_FORMAT"
ERR_INVALID_ENUM = "INVALID_ENUM_VALUE"
ERR_INVALID_TYPE = "INVALID_TYPE"
ERR_INVALID_URL = "INVALID_URL_FORMAT"

# pydantic error type -> our error code
_PYDANTIC_ERROR_CODES: dict[str, str] = {
    "missing": ERR_REQUIRED_MISSING,
    "string_too_short": ERR_VALUE_TOO_SHORT,
    "too_short": ERR_VALUE_TOO_SHORT,
    "string_too_long": ERR_VALUE_TOO_LONG,
    "too_long": ERR_VALUE_TOO_LONG,
    "greater_than": ERR_OUT_OF_RANGE,
    "greater_than_equal": ERR_OUT_OF_RANGE,
    "less_than": ERR_OUT_OF_RANGE,
    "less_than_equal": ERR_OUT_OF_RANGE,
    "literal_error": ERR_INVALID_ENUM,
    "enum": ERR_INVALID_ENUM,
    "string_pattern_mismatch": ERR_INVALID_FORMAT,
    "datetime_parsing": ERR_INVALID_FORMAT,
    "datetime_from_date_parsing": ERR_INVALID_FORMAT,
    "datetime_type": ERR_INVALID_FORMAT,
    "url_parsing": ERR_INVALID_URL,
    "url_scheme": ERR_INVALID_URL,
    "url_type": ERR_INVALID_URL,
    "int_parsing": ERR_INVALID_TYPE,
    "int_type": ERR_INVALID_TYPE,
    "int_from_float": ERR_INVALID_TYPE,
    "float_parsing": ERR_INVALID_TYPE,
    "float_type": ERR_INVALID_TYPE,
    "bool_parsing": ERR_INVALID_TYPE,
    "bool_type": ERR_INVALID_TYPE,
    "string_type": ERR_INVALID_TYPE,
    "dict_type": ERR_INVALID_TYPE,
    "list_type": ERR_INVALID_TYPE,
    "model_type": ERR_INVALID_TYPE,
    "model_attributes_type": ERR_INVALID_TYPE,
}


def record_fields(payload: Any) -> dict[str, Any]:
    """
    Raw field values of a record, without validation or serialization.

    Accepts a (possibly unvalidated) pydantic instance or a mapping.
    """
    if isinstance(payload, BaseModel):
        return dict(payload)
    if isinstance(payload, Mapping):
        return dict(payload)
    raise TypeError(f"cannot read fields from {type(payload).__name__}")


def field_errors_from(exc: ValidationError) -> list[FieldError]:
    """Translate a pydantic ValidationError into FieldError entries."""
    errors: list[FieldError] = []
    for err in exc.errors():
        error_type = err.get("type", "")
        field = ".".join(str(part) for part in err.get("loc", ())) or "record"
        value = None if error_type == "missing" else err.get("input")
        errors.append(FieldError(
            field=field,
            message=err.get("msg", "Invalid value"),
            code=_PYDANTIC_ERROR_CODES.get(error_type, ERR_VALIDATION_FAILED),
            value=_printable(value),
        ))
    return errors


def _printable(value: Any) -> Any:
    # Keep offending values JSON-friendly and short
    if value is None or isinstance(value, (bool, int, float)):
        return value
    text = value if isinstance(value, str) else repr(value)
    return text if len(text) <= 200 else text[:197] + "..."


class BaseValidator:
    """
    Pydantic-backed validator with hooks for business rules.

    Implements the ValidatorCapability protocol (validate_payload).
    """

    shape: ClassVar[type[BaseModel]]
    model_type: ClassVar[str] = ""
    provider: ClassVar[str] = PROVIDER

    def validate_payload(self, payload: Any) -> ValidationResult:
        """Validate one record and return a structured result."""
        started = time.perf_counter()

        try:
            fields = record_fields(payload)
        except TypeError as e:
            return ValidationResult(
                model_type=self.model_type,
                provider=self.provider,
                errors=[FieldError(
                    field="payload",
                    message=str(e),
                    code="TYPE_MISMATCH",
                    value=type(payload).__name__,
                )],
                duration_ms=elapsed_ms(started, time.perf_counter()),
            )

        errors: list[FieldError]
        warnings: list[FieldWarning] = []
        try:
            typed = self.shape.model_validate(fields)
        except ValidationError as e:
            errors = field_errors_from(e)
        else:
            errors = self.check_rules(typed)
            warnings = self.check_warnings(typed)

        return ValidationResult(
            model_type=self.model_type,
            provider=self.provider,
            errors=errors,
            warnings=warnings,
            duration_ms=elapsed_ms(started, time.perf_counter()),
        )

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def check_rules(self, record: Any) -> list[FieldError]:
        """Custom error rules for a field-valid record. Default: none."""
        return []

    def check_warnings(self, record: Any) -> list[FieldWarning]:
        """Business-rule warnings for a field-valid record. Default: none."""
        return []


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def age_in_days(value: datetime) -> float:
    """Days between value and now."""
    return (utc_now() - as_utc(value)).total_seconds() / 86400


# =============================================================================
# Change-request heuristics (GitLab merge requests, Bitbucket pull requests)
# =============================================================================

WIP_MARKERS = (
    "wip:", "[wip]", "work in progress", "do not merge", "dnm:", "[dnm]",
    "draft:", "[draft]", "temporary", "temp:", "fixup!", "squash!",
)

SECURITY_KEYWORDS = (
    "password", "secret", "key", "token", "credential", "auth",
    "security", "vulnerability", "exploit", "backdoor", "hardcode",
    "api_key", "private_key", "access_token", "secret_key",
)

CONFIG_FILE_MARKERS = ("dockerfile", "docker-compose", ".env", "config")


def find_markers(text: str | None, markers: tuple[str, ...]) -> list[str]:
    """Markers contained in text (case-insensitive), in marker order."""
    lowered = (text or "").lower()
    return [marker for marker in markers if marker in lowered]


def change_request_warnings(
    title: str,
    description: str | None,
    title_field: str,
    content_field: str,
    kind: str,
) -> list[FieldWarning]:
    """
    WIP_DETECTED, SECURITY_KEYWORDS and CONFIG_FILE_CHANGES for a change
    request's title and description.
    """
    warnings = []

    wip = find_markers(title, WIP_MARKERS)
    if wip:
        warnings.append(FieldWarning(
            field=title_field,
            message=f"{kind} title contains WIP indicator: '{wip[0]}'",
            code="WIP_DETECTED",
            suggestion="Update the title once the change is ready for review",
        ))

    keywords = list(dict.fromkeys(
        find_markers(title, SECURITY_KEYWORDS) + find_markers(description, SECURITY_KEYWORDS)
    ))
    if keywords:
        warnings.append(FieldWarning(
            field=content_field,
            message=f"Security-related keywords detected: {', '.join(keywords)}",
            code="SECURITY_KEYWORDS",
            suggestion="Ensure no sensitive information is exposed and consider a security review",
        ))

    if find_markers(title, CONFIG_FILE_MARKERS):
        warnings.append(FieldWarning(
            field=title_field,
            message="Configuration or deployment files may be modified",
            code="CONFIG_FILE_CHANGES",
            suggestion="Have the configuration change reviewed by the owning team",
        ))

    return warnings
