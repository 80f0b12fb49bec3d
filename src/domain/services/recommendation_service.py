"""Recommendation service layer with business logic."""

from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from core.exceptions import CategoryNotFoundError, RecommendationNotFoundError
from domain.entities.recommendation import Recommendation
from domain.repositories.unit_of_work import IUnitOfWork

UPDATABLE_FIELDS = frozenset({"title", "description", "url", "image_url", "position"})
# Cannot be cleared, only replaced.
REQUIRED_FIELDS = frozenset({"title", "position"})


class RecommendationService:
    """Service layer for Recommendation business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_all_for_user(
        self, user_id: UUID, category_id: Optional[UUID] = None
    ) -> List[Recommendation]:
        """Get the user's active recommendations, optionally for one category."""
        async with self._uow_factory() as uow:
            if category_id:
                await self._require_category(uow, category_id, user_id)
            return await uow.recommendations.get_active_for_user(  # type: ignore[no-any-return]
                user_id, category_id
            )

    async def create(
        self,
        user_id: UUID,
        category_id: UUID,
        title: str,
        description: Optional[str] = None,
        url: Optional[str] = None,
        image_url: Optional[str] = None,
        position: Optional[int] = None,
    ) -> Recommendation:
        """Create a recommendation at the end of its category by default."""
        async with self._uow_factory() as uow:
            await self._require_category(uow, category_id, user_id)

            if position is None:
                current_max = await uow.recommendations.get_max_position(category_id)
                position = 0 if current_max is None else current_max + 1

            recommendation = Recommendation(
                user_id=user_id,
                category_id=category_id,
                title=title,
                description=description,
                url=url,
                image_url=image_url,
                position=position,
            )
            created = await uow.recommendations.create(recommendation)
            await uow.commit()
            return created

    async def update(
        self,
        recommendation_id: UUID,
        user_id: UUID,
        changes: Dict[str, Any],
    ) -> Recommendation:
        """Update card fields; moving to another category requires owning it."""
        async with self._uow_factory() as uow:
            recommendation = await self._get_owned(uow, recommendation_id, user_id)

            new_category_id = changes.get("category_id")
            if new_category_id and new_category_id != recommendation.category_id:
                await self._require_category(uow, new_category_id, user_id)
                recommendation.category_id = new_category_id

            for name, value in changes.items():
                if name not in UPDATABLE_FIELDS:
                    continue
                if value is None and name in REQUIRED_FIELDS:
                    continue
                setattr(recommendation, name, value)

            updated = await uow.recommendations.update(recommendation)
            await uow.commit()
            return updated

    async def delete(self, recommendation_id: UUID, user_id: UUID) -> None:
        """Soft-delete a recommendation."""
        async with self._uow_factory() as uow:
            recommendation = await self._get_owned(uow, recommendation_id, user_id)
            recommendation.is_active = False
            await uow.recommendations.update(recommendation)
            await uow.commit()

    async def _get_owned(
        self, uow: IUnitOfWork, recommendation_id: UUID, user_id: UUID
    ) -> Recommendation:
        recommendation = await uow.recommendations.get(recommendation_id)
        if (
            not recommendation
            or not recommendation.is_active
            or recommendation.user_id != user_id
        ):
            raise RecommendationNotFoundError(str(recommendation_id))
        return recommendation

    async def _require_category(
        self, uow: IUnitOfWork, category_id: UUID, user_id: UUID
    ) -> None:
        category = await uow.categories.get(category_id)
        if not category or not category.is_active or category.user_id != user_id:
            raise CategoryNotFoundError(str(category_id))
