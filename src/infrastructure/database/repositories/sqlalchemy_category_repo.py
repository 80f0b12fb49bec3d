"""SQLAlchemy implementation of Category repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.category import Category
from infrastructure.database.models import CategoryModel


class SQLAlchemyCategoryRepository:
    """SQLAlchemy implementation of ICategoryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Category | None:
        """Get a category by ID."""
        stmt = select(CategoryModel).where(CategoryModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_for_user(self, user_id: UUID) -> list[Category]:
        """Get active categories for a user ordered by position."""
        stmt = (
            select(CategoryModel)
            .where(CategoryModel.user_id == user_id, CategoryModel.is_active.is_(True))
            .order_by(CategoryModel.position, CategoryModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_max_position(self, user_id: UUID) -> int | None:
        """Get the highest position among a user's active categories."""
        stmt = select(func.max(CategoryModel.position)).where(
            CategoryModel.user_id == user_id,
            CategoryModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        return result.scalar()

    async def create(self, category: Category) -> Category:
        """Create a new category."""
        model = self._to_model(category)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, category: Category) -> Category:
        """Update an existing category."""
        stmt = select(CategoryModel).where(CategoryModel.id == category.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Category {category.id} not found")

        model.name = category.name
        model.position = category.position
        model.is_active = category.is_active

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: CategoryModel) -> Category:
        """Convert ORM model to domain entity."""
        return Category(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            position=model.position,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Category) -> CategoryModel:
        """Convert domain entity to ORM model."""
        return CategoryModel(
            id=entity.id,
            user_id=entity.user_id,
            name=entity.name,
            position=entity.position,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
