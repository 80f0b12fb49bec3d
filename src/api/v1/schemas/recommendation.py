"""Pydantic schemas for Recommendation API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import optional_public_url


class RecommendationBase(BaseModel):
    """Fields shared by create and update."""

    description: str | None = Field(None, max_length=2000)
    url: str | None = Field(None, max_length=2048)
    image_url: str | None = Field(None, max_length=2048)

    @field_validator("url", "image_url")
    @classmethod
    def validate_urls(cls, v: str | None) -> str | None:
        return optional_public_url(v)


class RecommendationCreate(RecommendationBase):
    """Schema for creating a Recommendation."""

    category_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    position: int | None = Field(None, ge=0)


class RecommendationUpdate(RecommendationBase):
    """Schema for updating a Recommendation."""

    category_id: UUID | None = None
    title: str | None = Field(None, min_length=1, max_length=200)
    position: int | None = Field(None, ge=0)


class RecommendationResponse(BaseModel):
    """Schema for Recommendation response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    title: str
    description: str | None = None
    url: str | None = None
    image_url: str | None = None
    position: int
    created_at: datetime


class RecommendationListResponse(BaseModel):
    """Schema for list of Recommendations."""

    data: list[RecommendationResponse]


class RecommendationDetailResponse(BaseModel):
    """Schema for single Recommendation."""

    data: RecommendationResponse
