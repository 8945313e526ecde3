# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Model Validator API:
# - test_store.py / test_discovery.py: Model registry and discovery
# - test_adapter.py: Universal validator adapter
# - test_validators.py: Bundled validators
# - test_array_validator.py / test_batch_sessions.py: Services
# - test_api.py: Endpoints through FastAPI's TestClient
# - test_models.py: Schemas, settings and utilities
#
# Run tests with: pytest
# =============================================================================
