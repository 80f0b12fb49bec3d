"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel

from core.validation import validate_public_url


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


def optional_public_url(value: str | None) -> str | None:
    """Field validator helper: empty strings clear the URL."""
    if value is None or not value.strip():
        return None
    return validate_public_url(value)
