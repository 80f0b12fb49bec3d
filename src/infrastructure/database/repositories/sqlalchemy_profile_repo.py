"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import UsernameTakenError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_update(self, id: UUID) -> Profile | None:
        """Get a profile by ID with a row lock (SELECT ... FOR UPDATE)."""
        stmt = select(ProfileModel).where(ProfileModel.id == id).with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by username (case-insensitive)."""
        stmt = select(ProfileModel).where(
            func.lower(ProfileModel.username) == username.lower()
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def is_username_available(self, username: str) -> bool:
        """Check that no profile holds the username (case-insensitive)."""
        stmt = select(
            exists().where(func.lower(ProfileModel.username) == username.lower())
        )
        result = await self._session.execute(stmt)
        return not result.scalar()

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise UsernameTakenError(profile.username) from exc
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update the display fields of an existing profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.display_name = profile.display_name
        model.bio = profile.bio
        model.avatar_url = profile.avatar_url
        model.background_color = profile.background_color
        model.text_color = profile.text_color
        model.username_color = profile.username_color
        model.social_links = dict(profile.social_links)
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def set_username(self, id: UUID, username: str, changed_at: datetime) -> Profile:
        """Write the username and its change timestamp in a single UPDATE."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(
                username=username,
                username_changed_at=changed_at,
                updated_at=changed_at,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            await self._session.execute(stmt)
        except IntegrityError as exc:
            raise UsernameTakenError(username) from exc

        reload = (
            select(ProfileModel)
            .where(ProfileModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(reload)
        return self._to_entity(result.scalar_one())

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            username=model.username,
            username_changed_at=model.username_changed_at,
            display_name=model.display_name,
            bio=model.bio,
            avatar_url=model.avatar_url,
            background_color=model.background_color,
            text_color=model.text_color,
            username_color=model.username_color,
            social_links=dict(model.social_links or {}),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            email=entity.email,
            username=entity.username,
            username_changed_at=entity.username_changed_at,
            display_name=entity.display_name,
            bio=entity.bio,
            avatar_url=entity.avatar_url,
            background_color=entity.background_color,
            text_color=entity.text_color,
            username_color=entity.username_color,
            social_links=dict(entity.social_links),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
