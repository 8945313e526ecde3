# =============================================================================
# payloads/api.py - API Request Shape
# =============================================================================

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


class APIAuthorization(BaseModel):
    type: Literal["Bearer", "Basic", "ApiKey", "OAuth", "JWT"]
    token: str = Field(..., min_length=1)


class APIRequest(BaseModel):
    """An HTTP API request captured for validation."""

    method: HttpMethod
    url: str = Field(..., min_length=10, max_length=2048, pattern=r"^https?://\S+$")
    headers: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, Any] = Field(default_factory=dict)
    body: Any = None
    timestamp: datetime
    request_id: str | None = Field(default=None, min_length=1, max_length=255)
    user_agent: str | None = Field(default=None, max_length=1000)
    content_type: str | None = Field(default=None, pattern=r"^[\w.+-]+/[\w.+-]+")
    authorization: APIAuthorization | None = None
    timeout: int | None = Field(default=None, gt=0, le=300)
    retry_count: int = Field(default=0, ge=0, le=10)
    source: Literal["web", "mobile", "api", "cli", "automation", "test"] | None = None
