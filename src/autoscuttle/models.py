"""
Pydantic models for the scuttle REST API.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class StartRequest(BaseModel):
    """POST /scuttle/start request body."""

    target_server: str

    @field_validator("target_server")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("target_server must not be empty")
        return value


class StatusResponse(BaseModel):
    """GET /scuttle/status response."""

    running: bool
    attempts: int
    max_attempts: int
    target_server: Optional[str] = None
    last_target: Optional[str] = None
    last_outcome: Optional[str] = None


class Notification(BaseModel):
    """A single outbound scuttle event."""

    event: str
    payload: Any = None
    timestamp: str


class NotificationListResponse(BaseModel):
    """GET /scuttle/notifications response."""

    notifications: list[Notification] = Field(default_factory=list)
