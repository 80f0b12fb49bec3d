"""Unit tests for CategoryService."""

from uuid import UUID, uuid4

import pytest

from core.exceptions import CategoryNotFoundError
from domain.entities.category import Category
from domain.services.category_service import CategoryService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> CategoryService:
    return CategoryService(lambda: uow)


class TestCreate:
    async def test_appends_after_last_position(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.categories.get_max_position.return_value = 3
        uow.categories.create.side_effect = lambda category: category

        result = await service.create(user_id, "Books")

        assert result.position == 4
        assert uow.committed

    async def test_first_category_starts_at_zero(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.categories.get_max_position.return_value = None
        uow.categories.create.side_effect = lambda category: category

        result = await service.create(user_id, "Books")

        assert result.position == 0

    async def test_explicit_position_is_kept(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.categories.create.side_effect = lambda category: category

        result = await service.create(user_id, "Books", position=7)

        assert result.position == 7
        uow.categories.get_max_position.assert_not_called()


class TestUpdate:
    async def test_renames_and_moves(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        category = Category(user_id=user_id, name="Books")
        uow.categories.get.return_value = category
        uow.categories.update.side_effect = lambda c: c

        result = await service.update(category.id, user_id, name="Novels", position=2)

        assert result.name == "Novels"
        assert result.position == 2

    async def test_foreign_category_looks_missing(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        uow.categories.get.return_value = Category(user_id=other_user_id, name="Theirs")

        with pytest.raises(CategoryNotFoundError):
            await service.update(uuid4(), user_id, name="Mine now")


class TestDelete:
    async def test_soft_deletes_with_recommendations(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        category = Category(user_id=user_id, name="Books")
        uow.categories.get.return_value = category

        await service.delete(category.id, user_id)

        assert category.is_active is False
        uow.categories.update.assert_called_once_with(category)
        uow.recommendations.deactivate_for_category.assert_called_once_with(category.id)
        assert uow.committed

    async def test_already_deleted_looks_missing(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.categories.get.return_value = Category(user_id=user_id, name="Old", is_active=False)

        with pytest.raises(CategoryNotFoundError):
            await service.delete(uuid4(), user_id)
