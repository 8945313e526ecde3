# =============================================================================
# registry/adapter.py - Universal Validator Adapter
# =============================================================================
# Calls any validator capability in a uniform way and normalizes its output
# into a ValidationResult.
#
# A capability is any object exposing one of these single-argument methods,
# probed in order:
#   validate_payload -> validate -> validate_request -> validate_model
#
# The bundled validators implement `validate_payload` (the ValidatorCapability
# protocol); the fallback names let third-party validators plug in unchanged.
#
# Usage:
#   from registry import adapter
#   result = adapter.validate(capability, record, model_type="incident")
# =============================================================================

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from core.models.validation import FieldError, ValidationResult
from lib.utils import elapsed_ms

logger = logging.getLogger(__name__)

# Probed in this order; the first callable attribute wins
VALIDATION_METHOD_NAMES: tuple[str, ...] = (
    "validate_payload",
    "validate",
    "validate_request",
    "validate_model",
)

ADAPTER_PROVIDER = "universal-adapter"
FALLBACK_PROVIDER = "universal-adapter-fallback"


@runtime_checkable
class ValidatorCapability(Protocol):
    """The explicit contract every bundled validator implements."""

    def validate_payload(self, payload: Any) -> ValidationResult: ...


def resolve_method(capability: Any) -> Callable[[Any], Any] | None:
    """Return the first conventional validation method the capability exposes."""
    if isinstance(capability, ValidatorCapability):
        return capability.validate_payload

    for name in VALIDATION_METHOD_NAMES:
        method = getattr(capability, name, None)
        if callable(method):
            return method
    return None


def validate(capability: Any, record: Any, model_type: str = "") -> ValidationResult:
    """
    Validate one record with an arbitrary validator capability.

    Never raises for validator problems: a missing method, a validator
    exception or an unusable return value all come back as an invalid
    ValidationResult with a single explanatory error.

    Args:
        capability: Validator object (see VALIDATION_METHOD_NAMES)
        record: The decoded record (usually a data-shape instance)
        model_type: Registered type name, filled into the result if absent

    Returns:
        ValidationResult with model_type, provider, timestamp and duration set
    """
    method = resolve_method(capability)
    if method is None:
        logger.warning(
            f"No validation method on {type(capability).__name__} for model '{model_type}' "
            f"(tried: {', '.join(VALIDATION_METHOD_NAMES)})"
        )
        return _synthetic_failure(
            model_type,
            code="NO_VALIDATION_METHOD",
            message=f"No suitable validation method found for {model_type or 'model'}",
            provider=FALLBACK_PROVIDER,
        )

    started = time.perf_counter()
    try:
        raw = method(record)
    except Exception as e:
        logger.exception(f"Validator for '{model_type}' raised: {e}")
        return _synthetic_failure(
            model_type,
            code="VALIDATOR_ERROR",
            message=f"Validator raised {type(e).__name__}: {e}",
        )
    duration = elapsed_ms(started, time.perf_counter())

    result = normalize_result(raw, model_type)
    if not result.duration_ms:
        result.duration_ms = duration
    return result


def normalize_result(raw: Any, model_type: str = "") -> ValidationResult:
    """
    Convert whatever a validator returned into a ValidationResult.

    Accepts a ValidationResult, any other pydantic model, or a mapping.
    Blank model_type / provider are filled in.
    """
    # Re-validated even when it is already a ValidationResult: the validator
    # may have changed errors or is_valid after construction
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        return _synthetic_failure(
            model_type,
            code="INVALID_VALIDATOR_RESULT",
            message=f"Validator returned {type(raw).__name__}, expected a validation result",
        )
    try:
        result = ValidationResult.model_validate(dict(raw))
    except ValidationError as e:
        return _synthetic_failure(
            model_type,
            code="INVALID_VALIDATOR_RESULT",
            message=f"Validator returned a malformed result: {e.error_count()} problem(s)",
        )

    if not result.model_type:
        result.model_type = model_type
    if not result.provider:
        result.provider = ADAPTER_PROVIDER
    return result


def _synthetic_failure(
    model_type: str,
    code: str,
    message: str,
    provider: str = ADAPTER_PROVIDER,
) -> ValidationResult:
    return ValidationResult(
        model_type=model_type,
        provider=provider,
        errors=[FieldError(field="validator", message=message, code=code)],
    )
