# =============================================================================
# core/services/array_validator.py - Single & Array Validation
# =============================================================================
# Validates one record, or a list of records, against a registered model type.
#
# Array runs:
#   - Every record is validated independently, in input order
#   - A bad row never fails the request; it becomes an invalid row
#   - Only invalid or warning-bearing rows are returned in `results`
#   - The run status follows threshold_status()
#
# Usage:
#   result = validate_array(store, "incident", records, threshold=80.0)
#   result.status          # RunStatus.SUCCESS / RunStatus.FAILED
# =============================================================================

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from app.exceptions import InvalidRequestError
from core.models.array import (
    ArrayValidationResult,
    RowValidationResult,
    RunStatus,
    ValidationSummary,
)
from core.models.model_info import ModelInfo
from core.models.validation import FieldError, ValidationResult
from lib.utils import (
    detect_record_identifier,
    elapsed_ms,
    generate_batch_id,
    to_title_case,
    utc_now,
)
from registry import adapter
from registry.store import ModelStore

logger = logging.getLogger(__name__)

ARRAY_BATCH_PREFIX = "auto"


def success_rate(valid: int, total: int) -> float:
    """Percentage of valid records; 0.0 for an empty run."""
    if total <= 0:
        return 0.0
    return 100.0 * valid / total


def threshold_status(
    total: int,
    valid: int,
    rate: float,
    threshold: float | None,
) -> RunStatus:
    """
    Decide the outcome of an array run or batch.

    Rules:
        - No threshold: success, unless the run is exactly one invalid record
        - Threshold:    success iff rate >= threshold (equality passes)
    """
    if threshold is None:
        if total == 1 and valid == 0:
            return RunStatus.FAILED
        return RunStatus.SUCCESS
    return RunStatus.SUCCESS if rate >= threshold else RunStatus.FAILED


# =============================================================================
# Single record
# =============================================================================

def validate_record(store: ModelStore, type_name: str, record: Any) -> ValidationResult:
    """
    Validate one decoded record.

    Raises:
        ModelNotFoundError: If type_name isn't registered
    """
    info = store.get(type_name)
    return _validate_with(info, record)


def _validate_with(info: ModelInfo, record: Any) -> ValidationResult:
    if not isinstance(record, Mapping):
        return ValidationResult(
            model_type=info.type_name,
            provider=adapter.ADAPTER_PROVIDER,
            errors=[FieldError(
                field="record",
                message=f"Record must be a JSON object, got {type(record).__name__}",
                code="INVALID_RECORD",
                value=type(record).__name__,
            )],
        )

    instance = info.new_instance(record)
    return adapter.validate(info.validator, instance, info.type_name)


# =============================================================================
# Array
# =============================================================================

def validator_test_name(type_name: str) -> str:
    return f"{to_title_case(type_name)}Validator"


def validate_row(info: ModelInfo, row_index: int, record: Any) -> RowValidationResult:
    """Validate one array row and label it for the response."""
    started = time.perf_counter()
    result = _validate_with(info, record)

    test_name = validator_test_name(info.type_name)
    if result.errors:
        test_name = f"{test_name}:{result.errors[0].code}"
    elif result.warnings:
        test_name = f"{test_name}:{result.warnings[0].code}"

    return RowValidationResult(
        row_index=row_index,
        record_identifier=detect_record_identifier(record, row_index),
        is_valid=result.is_valid,
        validation_time_ms=elapsed_ms(started, time.perf_counter()),
        test_name=test_name,
        errors=result.errors,
        warnings=result.warnings,
    )


def validate_array(
    store: ModelStore,
    type_name: str,
    records: Sequence[Any],
    threshold: float | None = None,
    batch_id: str | None = None,
    max_records: int | None = None,
) -> ArrayValidationResult:
    """
    Validate a list of records against one model type.

    Args:
        store: Registry to resolve type_name in
        type_name: Registered model type
        records: Decoded records (non-objects become invalid rows)
        threshold: Optional minimum success rate, 0-100
        batch_id: ID for the run; generated ("auto_<hex>") if omitted
        max_records: Reject inputs longer than this

    Returns:
        ArrayValidationResult with counts, status, summary and the
        invalid or warning-bearing rows in input order

    Raises:
        ModelNotFoundError: If type_name isn't registered
        InvalidRequestError: If threshold is out of range or the input is too long
    """
    if threshold is not None and not 0 <= threshold <= 100:
        raise InvalidRequestError(
            f"Threshold must be between 0 and 100, got {threshold}",
            suggestion="Pass the minimum success rate as a percentage",
        )
    if max_records is not None and len(records) > max_records:
        raise InvalidRequestError(
            f"Too many records: {len(records)} (limit {max_records})",
            suggestion="Split the input into chunks and use a batch session",
            details={"limit": max_records, "received": len(records)},
        )

    info = store.get(type_name)
    started = time.perf_counter()

    valid = invalid = warning_rows = 0
    error_count = warning_count = 0
    passed_tests: set[str] = set()
    failed_tests: set[str] = set()
    results: list[RowValidationResult] = []

    for row_index, record in enumerate(records):
        row = validate_row(info, row_index, record)

        error_count += len(row.errors)
        warning_count += len(row.warnings)
        if row.is_valid:
            valid += 1
            passed_tests.add(row.test_name)
            if row.warnings:
                warning_rows += 1
        else:
            invalid += 1
            failed_tests.add(row.test_name)

        if not row.is_clean:
            results.append(row)

    total = len(records)
    rate = success_rate(valid, total)
    status = threshold_status(total, valid, rate, threshold)
    run_id = batch_id or generate_batch_id(ARRAY_BATCH_PREFIX)

    logger.info(
        f"Array run {run_id} ({type_name}): {valid}/{total} valid, "
        f"{warning_rows} with warnings -> {status.value}"
    )

    return ArrayValidationResult(
        batch_id=run_id,
        status=status,
        threshold=threshold,
        success_rate=rate,
        total_records=total,
        valid_records=valid,
        invalid_records=invalid,
        warning_records=warning_rows,
        processing_time_ms=elapsed_ms(started, time.perf_counter()),
        completed_at=utc_now(),
        summary=ValidationSummary(
            success_rate=rate,
            validation_errors=error_count,
            validation_warnings=warning_count,
            total_records_processed=total,
            total_tests_ran=total,
            successful_test_names=sorted(passed_tests),
            failed_test_names=sorted(failed_tests),
        ),
        results=results,
    )
