# =============================================================================
# validations/generic.py - Generic Payload Validator
# =============================================================================
# Exposes a factory (new_generic_validator) rather than relying on the
# class name, so discovery exercises both constructor conventions.
# =============================================================================

from core.models.validation import FieldWarning
from payloads.generic import GenericPayload
from validations.base import BaseValidator

MAX_DATA_KEYS = 50


class GenericValidator(BaseValidator):
    """Validates the envelope of free-form records."""

    shape = GenericPayload
    model_type = "generic"

    def check_warnings(self, record: GenericPayload) -> list[FieldWarning]:
        warnings = []

        if not record.data:
            warnings.append(FieldWarning(
                field="data",
                message="Record carries no data",
                code="EMPTY_DATA",
                suggestion="Include the record contents under 'data'",
            ))
        elif len(record.data) > MAX_DATA_KEYS:
            warnings.append(FieldWarning(
                field="data",
                message=f"Record has {len(record.data)} top-level data fields",
                code="LARGE_PAYLOAD",
                suggestion="Consider a dedicated model type for this record",
            ))

        if record.source is None:
            warnings.append(FieldWarning(
                field="source",
                message="Record source is not set",
                code="MISSING_SOURCE",
                suggestion="Set 'source' so records can be traced back",
            ))

        return warnings


def new_generic_validator() -> GenericValidator:
    return GenericValidator()
