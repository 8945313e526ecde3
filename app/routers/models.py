# =============================================================================
# app/routers/models.py - Model Listing Endpoints
# =============================================================================
# Read-only view of the model registry:
#   GET /models         - every registered model type
#   GET /models/{type}  - one model type (404 if unknown)
# =============================================================================

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from app.dependencies import StoreDep
from core.models.model_info import ModelListing

router = APIRouter()


class ModelListResponse(BaseModel):
    """Response for GET /models."""
    models: list[ModelListing]
    count: int


@router.get("/models", response_model=ModelListResponse)
async def list_models(store: StoreDep) -> dict[str, Any]:
    """
    List all registered model types with their validation endpoints.
    """
    listings = [info.to_listing() for info in store.list()]
    return {"models": listings, "count": len(listings)}


@router.get("/models/{model_type}", response_model=ModelListing)
async def get_model(model_type: str, store: StoreDep) -> dict[str, Any]:
    """
    Describe one registered model type.

    Raises:
        ModelNotFoundError: If the type isn't registered (404)
    """
    return store.get(model_type).to_listing()
