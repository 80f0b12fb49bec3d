"""Category service layer with business logic."""

from typing import Callable, List, Optional
from uuid import UUID

from core.exceptions import CategoryNotFoundError
from domain.entities.category import Category
from domain.repositories.unit_of_work import IUnitOfWork


class CategoryService:
    """Service layer for Category business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_all_for_user(self, user_id: UUID) -> List[Category]:
        """Get the user's active categories in display order."""
        async with self._uow_factory() as uow:
            return await uow.categories.get_active_for_user(user_id)  # type: ignore[no-any-return]

    async def create(
        self,
        user_id: UUID,
        name: str,
        position: Optional[int] = None,
    ) -> Category:
        """Create a category, appending it after the last one by default."""
        async with self._uow_factory() as uow:
            if position is None:
                current_max = await uow.categories.get_max_position(user_id)
                position = 0 if current_max is None else current_max + 1

            category = Category(user_id=user_id, name=name, position=position)
            created = await uow.categories.create(category)
            await uow.commit()
            return created

    async def update(
        self,
        category_id: UUID,
        user_id: UUID,
        name: Optional[str] = None,
        position: Optional[int] = None,
    ) -> Category:
        """Rename or reposition a category."""
        async with self._uow_factory() as uow:
            category = await self._get_owned(uow, category_id, user_id)

            if name:
                category.name = name
            if position is not None:
                category.position = position

            updated = await uow.categories.update(category)
            await uow.commit()
            return updated

    async def delete(self, category_id: UUID, user_id: UUID) -> None:
        """Soft-delete a category together with its recommendations."""
        async with self._uow_factory() as uow:
            category = await self._get_owned(uow, category_id, user_id)

            category.is_active = False
            await uow.categories.update(category)
            await uow.recommendations.deactivate_for_category(category_id)
            await uow.commit()

    async def _get_owned(
        self, uow: IUnitOfWork, category_id: UUID, user_id: UUID
    ) -> Category:
        """Fetch an active category owned by the user, else raise not found."""
        category = await uow.categories.get(category_id)
        if not category or not category.is_active or category.user_id != user_id:
            raise CategoryNotFoundError(str(category_id))
        return category
