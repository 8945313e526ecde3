# =============================================================================
# payloads/database.py - Database Query Shape
# =============================================================================
# The class name does not follow the <Title>Payload convention; discovery
# finds it by scanning this module for declared models.
# =============================================================================

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class DatabaseQuery(BaseModel):
    """A database query submitted for auditing."""

    query_id: str = Field(..., min_length=1, max_length=100)
    database: str = Field(..., min_length=1, max_length=64)
    operation: Literal["SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "ALTER", "DROP"]
    query: str = Field(..., min_length=1, max_length=10000)
    table: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    parameters: list[Any] = Field(default_factory=list)
    timeout_seconds: int = Field(default=30, gt=0, le=3600)
    executed_at: datetime
    executed_by: str = Field(..., min_length=1, max_length=100)
    row_limit: int | None = Field(default=None, gt=0)
