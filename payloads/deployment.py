# =============================================================================
# payloads/deployment.py - Deployment Webhook Shape
# =============================================================================

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class DeploymentPayload(BaseModel):
    """A deployment webhook event."""

    # Basic deployment information
    id: str = Field(..., min_length=1, max_length=50)
    app_name: str = Field(..., min_length=2, max_length=100)
    environment: Literal["development", "staging", "production"]
    version: str = Field(..., min_length=1, max_length=100)
    status: Literal["pending", "running", "completed", "failed"]

    # Deployment details
    branch: str = Field(..., min_length=1, max_length=200)
    commit_hash: str = Field(..., pattern=r"^[0-9a-fA-F]{40}$")
    deployed_by: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    deployed_at: datetime
    rollback: bool = False
