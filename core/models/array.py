# =============================================================================
# core/models/array.py - Multi-Record (Array) Validation Schemas
# =============================================================================
# These models define the result of validating MANY records in one call:
# - RowValidationResult: Outcome for one row
# - ValidationSummary: Aggregates over ALL rows (including elided ones)
# - ArrayValidationResult: The full response for an array request
#
# Only invalid or warning-bearing rows are listed in `results`; clean rows
# are counted but elided to keep responses small.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from lib.utils import utc_now
from .validation import FieldError, FieldWarning


class RunStatus(str, Enum):
    """
    Outcome of an array run or a completed batch.

    - success: threshold met (or no threshold and not a lone invalid record)
    - failed: success rate below threshold, or a single invalid record
    """
    SUCCESS = "success"
    FAILED = "failed"


class RowValidationResult(BaseModel):
    """Validation outcome for a single row of an array request."""

    row_index: int = Field(..., ge=0, description="Zero-based position in the input")
    record_identifier: str = Field(..., description="Detected record ID or row_<index>")
    is_valid: bool
    validation_time_ms: float = Field(default=0.0, ge=0)
    test_name: str = Field(
        ...,
        description="Validator applied, e.g. 'IncidentValidator:INVALID_ID_FORMAT'"
    )
    errors: list[FieldError] = Field(default_factory=list)
    warnings: list[FieldWarning] = Field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """Valid and warning-free (these rows are elided from responses)."""
        return self.is_valid and not self.warnings


class ValidationSummary(BaseModel):
    """Aggregated statistics across every row of an array run."""

    success_rate: float = Field(default=0.0, ge=0, le=100)
    validation_errors: int = Field(default=0, ge=0)
    validation_warnings: int = Field(default=0, ge=0)
    total_records_processed: int = Field(default=0, ge=0)
    total_tests_ran: int = Field(default=0, ge=0)
    successful_test_names: list[str] = Field(default_factory=list)
    failed_test_names: list[str] = Field(default_factory=list)


class ArrayValidationResult(BaseModel):
    """
    Result of validating a list of records against one model type.

    Invariants:
    - valid_records + invalid_records == total_records
    - success_rate == 100 * valid_records / total_records (0.0 when empty)

    Example:
        {
            "batch_id": "auto_9f86d081884c7d65",
            "status": "success",
            "threshold": 80.0,
            "success_rate": 80.0,
            "total_records": 10,
            "valid_records": 8,
            "invalid_records": 2,
            "warning_records": 1,
            "results": [...]
        }
    """

    batch_id: str
    status: RunStatus
    threshold: float | None = None
    success_rate: float = Field(default=0.0, ge=0, le=100)
    total_records: int = Field(default=0, ge=0)
    valid_records: int = Field(default=0, ge=0)
    invalid_records: int = Field(default=0, ge=0)
    warning_records: int = Field(default=0, ge=0, description="Valid rows carrying warnings")
    processing_time_ms: float = Field(default=0.0, ge=0)
    completed_at: datetime = Field(default_factory=utc_now)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    results: list[RowValidationResult] = Field(default_factory=list)
