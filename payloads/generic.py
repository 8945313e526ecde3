# =============================================================================
# payloads/generic.py - Generic Payload Shape
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class GenericPayload(BaseModel):
    """Free-form record with a minimal envelope."""

    id: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z][a-z0-9_.-]*$")
    source: str | None = Field(default=None, max_length=255)
    timestamp: datetime | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
