# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains the schemas shared by the registry, the services
# and the API:
# - validation.py: Single-record results (FieldError, FieldWarning, ValidationResult)
# - array.py: Multi-record results (RowValidationResult, ArrayValidationResult)
# - batch.py: Batch session request/response schemas
# - model_info.py: ModelInfo descriptor for registered model types
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Single-record validation
# -----------------------------------------------------------------------------
from .validation import (
    FieldError,
    FieldWarning,
    ValidationResult,
)

# -----------------------------------------------------------------------------
# Array validation
# -----------------------------------------------------------------------------
from .array import (
    ArrayValidationResult,
    RowValidationResult,
    RunStatus,
    ValidationSummary,
)

# -----------------------------------------------------------------------------
# Batch sessions
# -----------------------------------------------------------------------------
from .batch import (
    BatchChunkResponse,
    BatchCompleteResponse,
    BatchSnapshot,
    BatchStartRequest,
    BatchStartResponse,
    BatchState,
)

# -----------------------------------------------------------------------------
# Registry descriptors
# -----------------------------------------------------------------------------
from .model_info import ModelInfo, ModelListing

__all__ = [
    # Validation
    "FieldError",
    "FieldWarning",
    "ValidationResult",
    # Array
    "ArrayValidationResult",
    "RowValidationResult",
    "RunStatus",
    "ValidationSummary",
    # Batch
    "BatchChunkResponse",
    "BatchCompleteResponse",
    "BatchSnapshot",
    "BatchStartRequest",
    "BatchStartResponse",
    "BatchState",
    # Registry
    "ModelInfo",
    "ModelListing",
]
