# =============================================================================
# payloads/incident.py - Incident Report Shape
# =============================================================================

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints

Severity = Literal["low", "medium", "high", "critical"]

Tag = Annotated[str, StringConstraints(min_length=2, max_length=20)]


class IncidentPayload(BaseModel):
    """An operational incident report."""

    id: str = Field(..., min_length=3, max_length=50)
    title: str = Field(..., min_length=10, max_length=200)
    description: str = Field(..., min_length=20, max_length=1000)
    severity: Severity
    status: Literal["open", "investigating", "resolved", "closed"]
    priority: int = Field(..., ge=1, le=5)
    category: Literal["bug", "feature", "security", "performance"]
    environment: Literal["development", "staging", "production"]
    reported_by: str = Field(..., min_length=3, max_length=100)
    assigned_to: str | None = Field(default=None, min_length=3, max_length=100)
    reported_at: datetime
    updated_at: datetime | None = None
    tags: list[Tag] = Field(default_factory=list, max_length=10)
    impact: Severity | None = None
