"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends

from api.dependencies.auth import CurrentUser
from domain.entities.profile import Profile
from domain.services.category_service import CategoryService
from domain.services.profile_service import ProfileService
from domain.services.recommendation_service import RecommendationService
from domain.services.username_service import UsernameService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_username_service() -> UsernameService:
    """Get Username service instance."""
    return UsernameService(get_uow_factory())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_category_service() -> CategoryService:
    """Get Category service instance."""
    return CategoryService(get_uow_factory())


@lru_cache
def get_recommendation_service() -> RecommendationService:
    """Get Recommendation service instance."""
    return RecommendationService(get_uow_factory())


async def get_current_profile(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """Load the caller's profile, creating it from token metadata on first login."""
    return await service.get_or_create(
        user_id=user.id,
        email=user.email,
        display_name=user.display_name,
        requested_username=user.username,
    )


CurrentProfile = Annotated[Profile, Depends(get_current_profile)]
