# =============================================================================
# core/models/validation.py - Single-Record Validation Schemas
# =============================================================================
# These models define the result of validating ONE record:
# - FieldError: A field-level failure (makes the record invalid)
# - FieldWarning: A business-rule concern (never affects validity)
# - ValidationResult: Everything a validator reports about one record
#
# Invariant: is_valid is False if and only if errors is non-empty.
# The model validator below keeps the two in sync: errors force is_valid to
# False, and a bare "invalid" flag gets a VALIDATION_FAILED error.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from lib.utils import utc_now


class FieldError(BaseModel):
    """
    A field-level validation failure.

    Example:
        {
            "field": "severity",
            "message": "Field must be one of: low, medium, high, critical",
            "code": "INVALID_ENUM_VALUE",
            "value": "urgent"
        }
    """

    field: str = Field(..., description="Dotted path of the offending field")
    message: str = Field(..., description="Human-readable explanation")
    code: str = Field(..., description="Machine-readable error code")
    value: Any = Field(default=None, description="The offending value, if any")


class FieldWarning(BaseModel):
    """
    A business-rule warning with a suggested fix.

    Warnings never change is_valid.
    """

    field: str = Field(..., description="Dotted path of the field concerned")
    message: str = Field(..., description="Human-readable explanation")
    code: str = Field(..., description="Machine-readable warning code")
    suggestion: str | None = Field(default=None, description="How to address the warning")


class ValidationResult(BaseModel):
    """
    Result of validating a single record against one model type.

    Returned by:
    - POST /validate/{model_type}
    - POST /validate with a "payload" body

    Example:
        {
            "is_valid": false,
            "model_type": "incident",
            "provider": "pydantic",
            "errors": [{"field": "id", "message": "...", "code": "INVALID_ID_FORMAT", "value": "X"}],
            "warnings": [],
            "timestamp": "2024-09-24T10:30:00Z",
            "duration_ms": 0.412
        }
    """

    is_valid: bool = Field(default=True, description="False iff errors is non-empty")
    model_type: str = Field(default="", description="Registered model type name")
    provider: str = Field(default="", description="Which validator produced this result")
    errors: list[FieldError] = Field(default_factory=list)
    warnings: list[FieldWarning] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)
    duration_ms: float = Field(default=0.0, ge=0, description="Validation time in milliseconds")
    request_id: str | None = Field(default=None)

    @model_validator(mode="after")
    def _sync_validity(self) -> "ValidationResult":
        if self.errors:
            self.is_valid = False
        elif not self.is_valid:
            self.errors.append(FieldError(
                field="record",
                message="Validator reported the record as invalid without details",
                code="VALIDATION_FAILED",
            ))
        return self

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
