"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.category_repository import ICategoryRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.recommendation_repository import IRecommendationRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    categories: ICategoryRepository
    recommendations: IRecommendationRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
