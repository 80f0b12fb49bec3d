"""Recommendation repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.recommendation import Recommendation


class IRecommendationRepository(Protocol):
    """Repository interface for Recommendation entities."""

    async def get(self, id: UUID) -> Recommendation | None:
        """Get a recommendation by ID (active or not)."""
        ...

    async def get_active_for_user(
        self, user_id: UUID, category_id: UUID | None = None
    ) -> list[Recommendation]:
        """Get active recommendations for a user ordered by position."""
        ...

    async def get_active_for_categories_batch(
        self, category_ids: list[UUID]
    ) -> dict[UUID, list[Recommendation]]:
        """Get active recommendations for several categories in one query."""
        ...

    async def get_max_position(self, category_id: UUID) -> int | None:
        """Get the highest position among a category's active recommendations."""
        ...

    async def create(self, recommendation: Recommendation) -> Recommendation:
        """Create a new recommendation."""
        ...

    async def update(self, recommendation: Recommendation) -> Recommendation:
        """Update an existing recommendation."""
        ...

    async def deactivate_for_category(self, category_id: UUID) -> int:
        """Soft-delete every recommendation in a category, returning the count."""
        ...
