# =============================================================================
# payloads/github.py - GitHub Pull Request Webhook Shape
# =============================================================================
# A trimmed-down pull_request webhook: the fields the validator actually
# inspects. Unknown keys in incoming payloads are ignored.
# =============================================================================

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class User(BaseModel):
    login: str = Field(..., min_length=1, max_length=39)
    id: int = Field(..., gt=0)
    type: Literal["User", "Bot", "Organization"] = "User"


class Repository(BaseModel):
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=100)
    full_name: str = Field(..., pattern=r"^[\w.-]+/[\w.-]+$")
    private: bool = False
    fork: bool = False
    default_branch: str = "main"


class Reference(BaseModel):
    ref: str = Field(..., min_length=1, max_length=255)
    sha: str = Field(..., pattern=r"^[0-9a-fA-F]{40}$")


class PullRequest(BaseModel):
    id: int = Field(..., gt=0)
    number: int = Field(..., gt=0)
    state: Literal["open", "closed", "merged"]
    title: str = Field(..., min_length=1, max_length=256)
    body: str | None = Field(default=None, max_length=65536)
    draft: bool = False
    created_at: datetime
    updated_at: datetime
    user: User
    head: Reference
    base: Reference
    commits: int = Field(default=0, ge=0)
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    changed_files: int = Field(default=0, ge=0)
    requested_reviewers: list[User] = Field(default_factory=list)


class GitHubPayload(BaseModel):
    """Top-level pull_request webhook event."""

    action: Literal["opened", "closed", "reopened", "synchronize", "edited"]
    number: int = Field(..., gt=0)
    pull_request: PullRequest
    repository: Repository
    sender: User
