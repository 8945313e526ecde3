# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for results, batches and model descriptors
# - services/: Array validation and the batch session manager
#
# Code in this package should NOT build HTTP responses.
# This keeps the logic testable and reusable.
# =============================================================================
