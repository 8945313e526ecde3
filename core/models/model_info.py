# =============================================================================
# core/models/model_info.py - Registered Model Descriptor
# =============================================================================
# ModelInfo describes one registered model type: its data shape (a pydantic
# model class) and the validator capability that checks records of that shape.
#
# ModelInfo is frozen. Re-registering a type replaces the whole entry.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, Field

from lib.utils import utc_now


@dataclass(frozen=True)
class ModelInfo:
    """
    Descriptor for a registered model type.

    Attributes:
        type_name: Unique key, also the URL segment (/validate/{type_name})
        display_name: Human-readable name ("Incident Report")
        description: One-line description for GET /models
        data_shape: Pydantic model class records are decoded into
        validator: Opaque validator capability (see registry.adapter)
        version: Descriptor version
        registered_at: When the entry was registered
        author: Who registered it
        tags: Free-form labels for discovery listings
    """
    type_name: str
    display_name: str
    description: str
    data_shape: type[BaseModel]
    validator: Any
    version: str = "1.0.0"
    registered_at: datetime = field(default_factory=utc_now)
    author: str = "auto-registry"
    tags: tuple[str, ...] = ()

    @property
    def endpoint(self) -> str:
        return f"/validate/{self.type_name}"

    def new_instance(self, fields: Mapping[str, Any] | None = None) -> BaseModel:
        """
        Build a fresh, unvalidated instance of the data shape.

        Unknown keys are dropped; known keys are kept exactly as given so the
        validator (not the decoder) decides whether they are acceptable.
        """
        known = self.data_shape.model_fields
        values = {key: value for key, value in (fields or {}).items() if key in known}
        return self.data_shape.model_construct(**values)

    def to_listing(self) -> dict[str, Any]:
        """Summary used by GET /models."""
        return ModelListing(
            type=self.type_name,
            name=self.display_name,
            description=self.description,
            endpoint=self.endpoint,
            version=self.version,
            author=self.author,
            tags=list(self.tags),
            registered_at=self.registered_at,
        ).model_dump(mode="json")


class ModelListing(BaseModel):
    """One entry of GET /models."""

    type: str
    name: str
    description: str
    endpoint: str
    version: str
    author: str
    tags: list[str] = Field(default_factory=list)
    registered_at: datetime
