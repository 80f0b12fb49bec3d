"""Recommendation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.category import Category


@dataclass
class Recommendation:
    """A single recommendation card inside a category."""

    user_id: UUID
    category_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    url: str | None = None
    image_url: str | None = None
    position: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class CategoryWithRecommendations:
    """Read-only value object: a category and its active cards, in order."""

    category: Category
    recommendations: list[Recommendation]
