"""Pydantic schemas for the username endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.username import UsernameUpdateReason


class UsernameCheckRequest(BaseModel):
    """Candidate username to look up.

    Rules are not enforced here: an invalid candidate is a normal negative
    answer, not a 422.
    """

    username: str = Field("", max_length=256)


class UsernameCheckResponse(BaseModel):
    """Availability answer."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"available": False, "message": "Username is already taken"}
        },
    )

    available: bool
    message: str


class UsernameUpdateRequest(BaseModel):
    """Proposed new username."""

    username: str = Field(..., max_length=256)


class UsernameUpdateResponse(BaseModel):
    """Structured result of the update transaction."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Username can be changed in 25 days",
                "reason": "COOLDOWN",
                "username": "jane",
                "username_changed_at": "2026-10-13T09:00:00",
            }
        },
    )

    success: bool
    message: str
    reason: UsernameUpdateReason
    username: str | None = None
    username_changed_at: datetime | None = None


class CooldownResponse(BaseModel):
    """Username-change cooldown state."""

    can_change: bool
    days_remaining: int
    next_change_date: datetime | None = None
