"""Category repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.category import Category


class ICategoryRepository(Protocol):
    """Repository interface for Category entities."""

    async def get(self, id: UUID) -> Category | None:
        """Get a category by ID (active or not)."""
        ...

    async def get_active_for_user(self, user_id: UUID) -> list[Category]:
        """Get active categories for a user ordered by position."""
        ...

    async def get_max_position(self, user_id: UUID) -> int | None:
        """Get the highest position among a user's active categories."""
        ...

    async def create(self, category: Category) -> Category:
        """Create a new category."""
        ...

    async def update(self, category: Category) -> Category:
        """Update an existing category."""
        ...
