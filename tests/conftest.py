# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Fresh registry / batch manager per test (no shared singletons)
# - A TestClient built around those instances
# - Sample incident records (clean, warning-only, invalid)
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("BATCH_DELETE_DELAY_SECONDS", "0.05")

import pytest
from fastapi.testclient import TestClient

from core.services.batch_session_service import BatchSessionManager
from registry import DiscoveryEngine, ModelStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """An empty model store."""
    return ModelStore()


@pytest.fixture
def discovered_store():
    """A model store populated from the bundled payloads/validations."""
    model_store = ModelStore()
    report = DiscoveryEngine(model_store).discover_and_register_all()
    assert report.ok, report.errors
    return model_store


@pytest.fixture
def batch_manager():
    """A batch manager with a long expiry and a near-immediate delete delay."""
    manager = BatchSessionManager(expiry_seconds=600, delete_delay_seconds=0.05)
    yield manager
    manager.shutdown()


@pytest.fixture
def client(discovered_store, batch_manager):
    """TestClient for an app built around the per-test store and manager."""
    from app.main import create_app

    app = create_app(registry=discovered_store, batch_manager=batch_manager)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_incident():
    """An incident that passes every rule with no warnings."""
    return {
        "id": "INC-20240924-0001",
        "title": "Payment service returns intermittent timeouts",
        "description": "Roughly 2% of checkout requests time out after 30 seconds.",
        "severity": "medium",
        "status": "resolved",
        "priority": 2,
        "category": "performance",
        "environment": "staging",
        "reported_by": "alice",
        "assigned_to": "bob.smith",
        "reported_at": "2024-09-24T10:00:00Z",
        "tags": ["payments"],
    }


@pytest.fixture
def warning_incident(valid_incident):
    """A valid incident that triggers PRODUCTION_LOW_PRIORITY."""
    return {**valid_incident, "id": "INC-20240924-0002", "environment": "production"}


@pytest.fixture
def invalid_incident(valid_incident):
    """An incident whose ID breaks the INC-YYYYMMDD-NNNN format."""
    return {**valid_incident, "id": "BAD-1"}
