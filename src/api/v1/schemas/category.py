"""Pydantic schemas for Category API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Schema for creating a Category."""

    name: str = Field(..., min_length=1, max_length=100)
    position: int | None = Field(None, ge=0)


class CategoryUpdate(BaseModel):
    """Schema for updating a Category."""

    name: str | None = Field(None, min_length=1, max_length=100)
    position: int | None = Field(None, ge=0)


class CategoryResponse(BaseModel):
    """Schema for Category response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "name": "Books",
                "position": 0,
                "created_at": "2026-10-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    position: int
    created_at: datetime


class CategoryListResponse(BaseModel):
    """Schema for list of Categories."""

    data: list[CategoryResponse]


class CategoryDetailResponse(BaseModel):
    """Schema for single Category."""

    data: CategoryResponse
