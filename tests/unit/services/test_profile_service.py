"""Unit tests for ProfileService."""

from uuid import UUID

import pytest

from core.exceptions import ProfileNotFoundError, UsernameTakenError
from domain.entities.category import Category
from domain.entities.profile import Profile
from domain.entities.recommendation import Recommendation
from domain.services.profile_service import ProfileService, derive_username
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


class TestDeriveUsername:
    def test_prefers_valid_signup_username(self):
        assert derive_username("someone@example.com", "Jane_Doe") == "jane_doe"

    def test_ignores_invalid_signup_username(self):
        assert derive_username("jane.doe@example.com", "not valid!") == "janedoe"

    def test_pads_short_local_part(self):
        assert derive_username("jo@example.com") == "jo-user"

    def test_falls_back_to_user(self):
        assert derive_username("...@example.com") == "user"

    def test_truncates_long_local_part(self):
        assert derive_username("a" * 40 + "@example.com") == "a" * 20


class TestGetOrCreate:
    async def test_returns_existing_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        existing = Profile(id=user_id, username="jane")
        uow.profiles.get.return_value = existing

        result = await service.get_or_create(user_id, "jane@example.com")

        assert result is existing
        uow.profiles.create.assert_not_called()

    async def test_creates_profile_on_first_login(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get.return_value = None
        uow.profiles.is_username_available.return_value = True
        uow.profiles.create.side_effect = lambda profile: profile

        result = await service.get_or_create(
            user_id, "jane@example.com", requested_username="jane"
        )

        assert result.id == user_id
        assert result.username == "jane"
        assert result.display_name == "jane"
        assert result.username_changed_at is None
        assert uow.committed

    async def test_appends_suffix_when_default_is_taken(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get.return_value = None
        uow.profiles.is_username_available.side_effect = [False, True]
        uow.profiles.create.side_effect = lambda profile: profile

        result = await service.get_or_create(user_id, "jane@example.com")

        assert result.username.startswith("jane-")
        assert len(result.username) == len("jane-") + 4

    async def test_concurrent_first_login_returns_winner(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        winner = Profile(id=user_id, username="jane")
        uow.profiles.get.side_effect = [None, winner]
        uow.profiles.is_username_available.return_value = True
        uow.profiles.create.side_effect = UsernameTakenError("jane")

        result = await service.get_or_create(user_id, "jane@example.com")

        assert result is winner
        assert uow.rolled_back


class TestUpdate:
    async def test_updates_only_editable_fields(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        profile = Profile(id=user_id, username="jane")
        uow.profiles.get.return_value = profile
        uow.profiles.update.side_effect = lambda p: p

        result = await service.update(
            user_id,
            {"display_name": "Jane", "background_color": "#abcdef", "username": "hijack"},
        )

        assert result.display_name == "Jane"
        assert result.background_color == "#ABCDEF"
        assert result.username == "jane"
        assert uow.committed

    async def test_missing_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.update(user_id, {"bio": "hi"})


class TestGetPublicPage:
    async def test_groups_recommendations_by_category(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        profile = Profile(id=user_id, username="jane")
        books = Category(user_id=user_id, name="Books", position=0)
        films = Category(user_id=user_id, name="Films", position=1)
        card = Recommendation(user_id=user_id, category_id=books.id, title="Dune")
        uow.profiles.get_by_username.return_value = profile
        uow.categories.get_active_for_user.return_value = [books, films]
        uow.recommendations.get_active_for_categories_batch.return_value = {books.id: [card]}

        result_profile, sections = await service.get_public_page("JANE")

        assert result_profile is profile
        uow.profiles.get_by_username.assert_called_once_with("jane")
        assert [s.category.name for s in sections] == ["Books", "Films"]
        assert sections[0].recommendations == [card]
        assert sections[1].recommendations == []

    async def test_unknown_username(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get_by_username.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.get_public_page("nobody")
