"""Username rules and the username-change cooldown policy.

Shared by the server (availability lookup, update transaction) and the
client library (local pre-validation, submit gating).
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"^[a-z0-9_-]+$")
USERNAME_COOLDOWN = timedelta(days=30)

MSG_TOO_SHORT = f"Username must be at least {USERNAME_MIN_LENGTH} characters long"
MSG_TOO_LONG = f"Username must be at most {USERNAME_MAX_LENGTH} characters long"
MSG_BAD_CHARACTERS = "Username can only contain letters, numbers, underscores, and hyphens"
MSG_TAKEN = "Username is already taken"
MSG_AVAILABLE = "Username is available"
MSG_CHECK_FAILED = "Error checking username availability"
MSG_UNCHANGED = "Username unchanged"
MSG_UPDATED = "Username updated successfully"

_ONE_DAY_SECONDS = 86400


def normalize_username(raw: str) -> str:
    """Trim and lowercase a candidate username."""
    return raw.strip().lower()


def username_violation(username: str) -> str | None:
    """Return the message for the first rule ``username`` breaks, or None.

    Expects a normalized value; an empty string is reported as too short.
    """
    if len(username) < USERNAME_MIN_LENGTH:
        return MSG_TOO_SHORT
    if len(username) > USERNAME_MAX_LENGTH:
        return MSG_TOO_LONG
    if not USERNAME_PATTERN.match(username):
        return MSG_BAD_CHARACTERS
    return None


def is_valid_username(username: str) -> bool:
    return username_violation(username) is None


@dataclass(frozen=True, slots=True)
class AvailabilityResult:
    """Answer to "is this username free to claim?".

    ``is_error`` marks the transport/server failure result: the name is not
    known to be taken, but it still must not unlock a submit.
    """

    available: bool
    message: str = ""
    is_checking: bool = False
    is_error: bool = False

    @classmethod
    def neutral(cls) -> "AvailabilityResult":
        return cls(available=False)

    @classmethod
    def rejected(cls, message: str) -> "AvailabilityResult":
        return cls(available=False, message=message)

    @classmethod
    def failed(cls) -> "AvailabilityResult":
        return cls(available=False, message=MSG_CHECK_FAILED, is_error=True)

    @property
    def allows_submit(self) -> bool:
        return self.available and not self.is_checking


@dataclass(frozen=True, slots=True)
class CooldownInfo:
    """Whether a username change is allowed right now."""

    can_change: bool
    days_remaining: int
    next_change_date: datetime | None


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def compute_cooldown(
    username_changed_at: datetime | None,
    now: datetime | None = None,
) -> CooldownInfo:
    """Compute the cooldown state from the last change time.

    Remaining time is rounded up to whole days: exactly 24h left reads as
    1 day, and any positive remainder below that also reads as 1 day.
    """
    if username_changed_at is None:
        return CooldownInfo(can_change=True, days_remaining=0, next_change_date=None)

    changed_at = _as_naive_utc(username_changed_at)
    current = _as_naive_utc(now) if now is not None else datetime.utcnow()
    next_change = changed_at + USERNAME_COOLDOWN

    if current >= next_change:
        return CooldownInfo(can_change=True, days_remaining=0, next_change_date=next_change)

    remaining = (next_change - current).total_seconds()
    return CooldownInfo(
        can_change=False,
        days_remaining=math.ceil(remaining / _ONE_DAY_SECONDS),
        next_change_date=next_change,
    )


def cooldown_message(info: CooldownInfo) -> str:
    """Message shown when a change is blocked by the cooldown."""
    unit = "day" if info.days_remaining == 1 else "days"
    return f"Username can be changed in {info.days_remaining} {unit}"


class UsernameUpdateReason(StrEnum):
    """Outcome of a username update transaction."""

    UPDATED = "UPDATED"
    UNCHANGED = "UNCHANGED"
    INVALID = "INVALID"
    COOLDOWN = "COOLDOWN"
    TAKEN = "TAKEN"


@dataclass(frozen=True, slots=True)
class UsernameUpdateResult:
    """Structured success/failure result of a username change."""

    success: bool
    message: str
    reason: UsernameUpdateReason
    username: str | None = None
    username_changed_at: datetime | None = None
