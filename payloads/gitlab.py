# =============================================================================
# payloads/gitlab.py - GitLab Webhook Shape
# =============================================================================
# Push, tag push and merge request events. object_attributes carries the
# merge request and is only present for merge_request events.
# =============================================================================

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

USERNAME_PATTERN = r"^[A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?$"


class GitLabUser(BaseModel):
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255, pattern=USERNAME_PATTERN)
    email: str | None = Field(default=None, max_length=255)


class GitLabProject(BaseModel):
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    path_with_namespace: str = Field(..., pattern=r"^[\w.-]+(/[\w.-]+)+$")
    web_url: str = Field(..., pattern=r"^https?://")
    default_branch: str = "main"
    # 0 private, 10 internal, 20 public
    visibility_level: int = Field(default=0, ge=0, le=20)


class GitLabCommitAuthor(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)


class GitLabCommit(BaseModel):
    id: str = Field(..., pattern=r"^[0-9a-fA-F]{40}$")
    message: str = Field(..., min_length=1)
    timestamp: datetime
    author: GitLabCommitAuthor
    added: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class GitLabMergeRequest(BaseModel):
    id: int = Field(..., gt=0)
    iid: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1_000_000)
    state: Literal["opened", "closed", "locked", "merged"]
    merge_status: Literal["unchecked", "checking", "can_be_merged", "cannot_be_merged"] = "unchecked"
    target_branch: str = Field(..., min_length=1, max_length=255)
    source_branch: str = Field(..., min_length=1, max_length=255)
    work_in_progress: bool = False
    squash: bool = False
    created_at: datetime
    updated_at: datetime


class GitLabLabel(BaseModel):
    id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., pattern=r"^#?[0-9a-fA-F]{6}$")


class GitLabPayload(BaseModel):
    """Top-level GitLab webhook event."""

    object_kind: Literal["push", "tag_push", "merge_request"]
    before: str | None = Field(default=None, pattern=r"^[0-9a-fA-F]{40}$")
    after: str | None = Field(default=None, pattern=r"^[0-9a-fA-F]{40}$")
    checkout_sha: str | None = Field(default=None, pattern=r"^[0-9a-fA-F]{40}$")
    user: GitLabUser | None = None
    user_username: str | None = Field(default=None, max_length=255, pattern=USERNAME_PATTERN)
    project: GitLabProject
    commits: list[GitLabCommit] = Field(default_factory=list)
    total_commits_count: int = Field(default=0, ge=0)
    object_attributes: GitLabMergeRequest | None = None
    assignees: list[GitLabUser] = Field(default_factory=list)
    reviewers: list[GitLabUser] = Field(default_factory=list)
    labels: list[GitLabLabel] = Field(default_factory=list)
