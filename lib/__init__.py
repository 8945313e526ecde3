# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - rwlock.py: Reader-writer lock used by the model registry
# - utils.py: Shared utilities (timestamps, batch IDs, name casing)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.rwlock import ReadWriteLock
from lib.utils import (
    detect_record_identifier,
    elapsed_ms,
    generate_batch_id,
    to_display_words,
    to_title_case,
    utc_now,
)

__all__ = [
    "ReadWriteLock",
    "detect_record_identifier",
    "elapsed_ms",
    "generate_batch_id",
    "to_display_words",
    "to_title_case",
    "utc_now",
]
