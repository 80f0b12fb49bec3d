"""SQLAlchemy implementation of Recommendation repository."""

from collections import defaultdict
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.recommendation import Recommendation
from infrastructure.database.models import RecommendationModel


class SQLAlchemyRecommendationRepository:
    """SQLAlchemy implementation of IRecommendationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Recommendation | None:
        """Get a recommendation by ID."""
        stmt = select(RecommendationModel).where(RecommendationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_for_user(
        self, user_id: UUID, category_id: UUID | None = None
    ) -> list[Recommendation]:
        """Get active recommendations for a user ordered by position."""
        stmt = select(RecommendationModel).where(
            RecommendationModel.user_id == user_id,
            RecommendationModel.is_active.is_(True),
        )
        if category_id:
            stmt = stmt.where(RecommendationModel.category_id == category_id)
        stmt = stmt.order_by(RecommendationModel.position, RecommendationModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_active_for_categories_batch(
        self, category_ids: list[UUID]
    ) -> dict[UUID, list[Recommendation]]:
        """Get active recommendations for several categories in a single query."""
        if not category_ids:
            return {}

        stmt = (
            select(RecommendationModel)
            .where(
                RecommendationModel.category_id.in_(category_ids),
                RecommendationModel.is_active.is_(True),
            )
            .order_by(RecommendationModel.position, RecommendationModel.created_at)
        )
        result = await self._session.execute(stmt)

        by_category: dict[UUID, list[Recommendation]] = defaultdict(list)
        for model in result.scalars():
            by_category[model.category_id].append(self._to_entity(model))

        return dict(by_category)

    async def get_max_position(self, category_id: UUID) -> int | None:
        """Get the highest position among a category's active recommendations."""
        stmt = select(func.max(RecommendationModel.position)).where(
            RecommendationModel.category_id == category_id,
            RecommendationModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        return result.scalar()

    async def create(self, recommendation: Recommendation) -> Recommendation:
        """Create a new recommendation."""
        model = self._to_model(recommendation)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, recommendation: Recommendation) -> Recommendation:
        """Update an existing recommendation."""
        stmt = select(RecommendationModel).where(RecommendationModel.id == recommendation.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Recommendation {recommendation.id} not found")

        model.category_id = recommendation.category_id
        model.title = recommendation.title
        model.description = recommendation.description
        model.url = recommendation.url
        model.image_url = recommendation.image_url
        model.position = recommendation.position
        model.is_active = recommendation.is_active

        await self._session.flush()
        return self._to_entity(model)

    async def deactivate_for_category(self, category_id: UUID) -> int:
        """Soft-delete all active recommendations in a category."""
        stmt = (
            update(RecommendationModel)
            .where(
                RecommendationModel.category_id == category_id,
                RecommendationModel.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0

    def _to_entity(self, model: RecommendationModel) -> Recommendation:
        """Convert ORM model to domain entity."""
        return Recommendation(
            id=model.id,
            user_id=model.user_id,
            category_id=model.category_id,
            title=model.title,
            description=model.description,
            url=model.url,
            image_url=model.image_url,
            position=model.position,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Recommendation) -> RecommendationModel:
        """Convert domain entity to ORM model."""
        return RecommendationModel(
            id=entity.id,
            user_id=entity.user_id,
            category_id=entity.category_id,
            title=entity.title,
            description=entity.description,
            url=entity.url,
            image_url=entity.image_url,
            position=entity.position,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
