# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# create_app() stores the model registry and batch manager on app.state,
# so tests can build an app around their own instances.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from core.services.batch_session_service import BatchSessionManager
from registry.store import ModelStore


def get_store(request: Request) -> ModelStore:
    """Get the model registry the app was built with."""
    return request.app.state.registry


def get_batch_manager(request: Request) -> BatchSessionManager:
    """Get the batch session manager the app was built with."""
    return request.app.state.batch_manager


# Type aliases for dependency injection
StoreDep = Annotated[ModelStore, Depends(get_store)]
BatchManagerDep = Annotated[BatchSessionManager, Depends(get_batch_manager)]
