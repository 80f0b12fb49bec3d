"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.category import CategoryResponse
from api.v1.schemas.common import optional_public_url
from api.v1.schemas.recommendation import RecommendationResponse
from api.v1.schemas.username import CooldownResponse
from core.validation import HEX_COLOR_PATTERN

SOCIAL_NETWORKS = (
    "youtube",
    "twitter",
    "instagram",
    "linkedin",
    "tiktok",
    "threads",
    "snapchat",
    "website",
)


class ProfileUpdate(BaseModel):
    """Schema for updating profile display fields."""

    display_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=500)
    background_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    text_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    username_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    social_links: dict[str, str] | None = None

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v: str | None) -> str | None:
        return optional_public_url(v)

    @field_validator("social_links")
    @classmethod
    def validate_social_links(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        if v is None:
            return None
        cleaned: dict[str, str] = {}
        for network, url in v.items():
            if network not in SOCIAL_NETWORKS:
                raise ValueError(f"Unsupported social network: {network}")
            link = optional_public_url(url)
            if link:
                cleaned[network] = link
        return cleaned


class ProfileResponse(BaseModel):
    """Schema for the owner's view of a profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str
    username_changed_at: datetime | None = None
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    background_color: str
    text_color: str
    username_color: str
    social_links: dict[str, str] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    """Owner's profile plus the username cooldown state."""

    data: ProfileResponse
    cooldown: CooldownResponse


class PublicProfileResponse(BaseModel):
    """Public fields of a profile (no email, no timestamps)."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    background_color: str
    text_color: str
    username_color: str
    social_links: dict[str, str] = Field(default_factory=dict)


class PublicSectionResponse(BaseModel):
    """A category with its active recommendations."""

    category: CategoryResponse
    recommendations: list[RecommendationResponse]


class PublicPageResponse(BaseModel):
    """Everything needed to render a public page."""

    profile: PublicProfileResponse
    is_owner: bool = False
    sections: list[PublicSectionResponse]
