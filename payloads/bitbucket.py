# =============================================================================
# payloads/bitbucket.py - Bitbucket Webhook Shape
# =============================================================================
# Repository events carrying one of: a pull request, a push, or a comment.
# =============================================================================

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class BitbucketUser(BaseModel):
    uuid: str = Field(..., pattern=r"^\{[0-9a-fA-F-]{36}\}$")
    username: str = Field(..., min_length=1, max_length=30, pattern=r"^[A-Za-z0-9]([A-Za-z0-9_-]*[A-Za-z0-9])?$")
    display_name: str = Field(..., min_length=1, max_length=255)
    type: Literal["user", "team"] = "user"


class BitbucketRepository(BaseModel):
    uuid: str = Field(..., pattern=r"^\{[0-9a-fA-F-]{36}\}$")
    name: str = Field(..., min_length=1, max_length=62)
    full_name: str = Field(..., pattern=r"^[\w.-]+/[\w.-]+$")
    owner: BitbucketUser
    is_private: bool = True
    created_on: datetime
    updated_on: datetime
    size: int = Field(default=0, ge=0)
    fork_policy: Literal["allow_forks", "no_public_forks", "no_forks"] = "allow_forks"


class BitbucketCommit(BaseModel):
    hash: str = Field(..., pattern=r"^[0-9a-fA-F]{7,40}$")
    message: str = ""
    date: datetime | None = None


class BitbucketBranch(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    commit: BitbucketCommit | None = None


class BitbucketEndpoint(BaseModel):
    branch: BitbucketBranch


class BitbucketReviewer(BaseModel):
    user: BitbucketUser
    role: Literal["PARTICIPANT", "REVIEWER"] = "REVIEWER"
    approved: bool = False


class BitbucketPullRequest(BaseModel):
    id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    state: Literal["OPEN", "MERGED", "DECLINED", "SUPERSEDED"]
    author: BitbucketUser
    source: BitbucketEndpoint
    destination: BitbucketEndpoint
    created_on: datetime
    updated_on: datetime
    task_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    reviewers: list[BitbucketUser] = Field(default_factory=list)
    participants: list[BitbucketReviewer] = Field(default_factory=list)


class BitbucketChangeRef(BaseModel):
    type: Literal["branch", "tag"]
    name: str = Field(..., min_length=1, max_length=255)


class BitbucketChange(BaseModel):
    new: BitbucketChangeRef | None = None
    old: BitbucketChangeRef | None = None
    forced: bool = False
    commits: list[BitbucketCommit] = Field(default_factory=list)


class BitbucketPush(BaseModel):
    changes: list[BitbucketChange] = Field(..., min_length=1)


class BitbucketContent(BaseModel):
    raw: str = Field(..., min_length=1)
    markup: Literal["markdown", "creole", "plaintext"] = "markdown"


class BitbucketComment(BaseModel):
    id: int = Field(..., gt=0)
    content: BitbucketContent
    user: BitbucketUser
    created_on: datetime
    updated_on: datetime | None = None


class BitbucketPayload(BaseModel):
    """Top-level Bitbucket webhook event."""

    repository: BitbucketRepository
    actor: BitbucketUser
    pullrequest: BitbucketPullRequest | None = None
    push: BitbucketPush | None = None
    comment: BitbucketComment | None = None
