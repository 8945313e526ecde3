# =============================================================================
# payloads/slack.py - Slack Message Shape
# =============================================================================
# Slash commands, event callbacks and interactive components as delivered to
# an app's request URL. `message` holds the posted message for events.
# =============================================================================

from typing import Literal

from pydantic import BaseModel, Field

SLACK_TS_PATTERN = r"^\d{10,11}\.\d{6}$"


class SlackFile(BaseModel):
    id: str = Field(..., pattern=r"^F[A-Z0-9]{8,}$")
    name: str = Field(..., min_length=1, max_length=255)
    filetype: str = Field(default="", max_length=32)
    size: int = Field(default=0, ge=0)


class SlackAttachment(BaseModel):
    color: str | None = Field(default=None, pattern=r"^(good|warning|danger|#?[0-9a-fA-F]{6})$")
    title: str | None = Field(default=None, max_length=255)
    text: str | None = Field(default=None, max_length=8000)
    fallback: str | None = None


class SlackMessage(BaseModel):
    type: Literal["message"] = "message"
    text: str = Field(default="", max_length=40000)
    user: str | None = Field(default=None, pattern=r"^[UWB][A-Z0-9]{8,}$")
    ts: str = Field(..., pattern=SLACK_TS_PATTERN)
    channel: str | None = None
    attachments: list[SlackAttachment] = Field(default_factory=list)
    blocks: list[dict] = Field(default_factory=list)
    files: list[SlackFile] = Field(default_factory=list)


class SlackPayload(BaseModel):
    """One request delivered by Slack."""

    type: Literal["url_verification", "event_callback", "command", "interactive_component"]
    token: str = Field(..., pattern=r"^xox[bspar]-|^xapp-")
    team_id: str = Field(..., pattern=r"^T[A-Z0-9]{8,}$")
    team_domain: str | None = Field(default=None, pattern=r"^[a-z0-9-]{1,21}$")
    channel_id: str | None = Field(default=None, pattern=r"^[CDG][A-Z0-9]{8,}$")
    channel_name: str | None = Field(default=None, pattern=r"^(D[A-Z0-9]{8,}|G[A-Z0-9]{8,}|#?[a-z0-9_-]{1,80})$")
    user_id: str | None = Field(default=None, pattern=r"^[UWB][A-Z0-9]{8,}$")
    user_name: str | None = Field(default=None, min_length=1, max_length=21)
    command: str | None = Field(default=None, pattern=r"^/[a-z0-9_-]{1,32}$")
    text: str | None = Field(default=None, max_length=3000)
    response_url: str | None = Field(default=None, pattern=r"^https?://")
    ts: str | None = Field(default=None, pattern=SLACK_TS_PATTERN)
    message: SlackMessage | None = None
