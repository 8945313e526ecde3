# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .array_validator import (
    success_rate,
    threshold_status,
    validate_array,
    validate_record,
)
from .batch_session_service import (
    BatchSession,
    BatchSessionManager,
    expiry_sweep,
    get_batch_session_manager,
)

__all__ = [
    "success_rate",
    "threshold_status",
    "validate_array",
    "validate_record",
    "BatchSession",
    "BatchSessionManager",
    "expiry_sweep",
    "get_batch_session_manager",
]
