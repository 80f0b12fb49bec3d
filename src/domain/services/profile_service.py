"""Profile service layer with business logic."""

import re
import secrets
from collections.abc import Callable
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import ProfileNotFoundError, UsernameTakenError
from domain.entities.profile import Profile
from domain.entities.recommendation import CategoryWithRecommendations
from domain.entities.username import (
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    is_valid_username,
    normalize_username,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# Fields a user may edit through the generic profile update.
EDITABLE_FIELDS = frozenset(
    {
        "display_name",
        "bio",
        "avatar_url",
        "background_color",
        "text_color",
        "username_color",
        "social_links",
    }
)

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9_-]")
_SUFFIX_ATTEMPTS = 5


def derive_username(email: str, requested_username: str | None = None) -> str:
    """Pick a default username from signup metadata or the email local part."""
    if requested_username:
        requested = normalize_username(requested_username)
        if is_valid_username(requested):
            return requested

    local_part = email.split("@", 1)[0].lower()
    base = _DISALLOWED_CHARS.sub("", local_part)[:USERNAME_MAX_LENGTH]
    if not base:
        return "user"
    if len(base) < USERNAME_MIN_LENGTH:
        base = f"{base}-user"
    return base


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_or_create(
        self,
        user_id: UUID,
        email: str,
        display_name: str | None = None,
        requested_username: str | None = None,
    ) -> Profile:
        """Return the caller's profile, creating it on first login."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if profile:
                return profile

            username = await self._claimable_username(
                uow, derive_username(email, requested_username)
            )
            profile = Profile(
                id=user_id,
                email=email,
                username=username,
                display_name=display_name or username,
            )
            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except UsernameTakenError:
                await uow.rollback()
                created = None

        if created is None:
            # A concurrent first request may have created the row already
            async with self._uow_factory() as uow:
                existing = await uow.profiles.get(user_id)
            if not existing:
                raise UsernameTakenError(username)
            return existing

        logger.info("profile_created", user_id=str(user_id), username=created.username)
        return created

    async def get_by_id(self, user_id: UUID) -> Profile:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile

    async def update(self, user_id: UUID, changes: dict[str, Any]) -> Profile:
        """Update display fields. The username is never touched here."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            for name, value in changes.items():
                if name not in EDITABLE_FIELDS:
                    continue
                if name.endswith("_color") and value is not None:
                    value = value.upper()
                setattr(profile, name, value)

            updated = await uow.profiles.update(profile)
            await uow.commit()
            return updated

    async def get_public_page(
        self, username: str
    ) -> tuple[Profile, list[CategoryWithRecommendations]]:
        """Load a public page: the profile plus active categories and cards."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_username(normalize_username(username))
            if not profile:
                raise ProfileNotFoundError(username)

            categories = await uow.categories.get_active_for_user(profile.id)
            by_category = await uow.recommendations.get_active_for_categories_batch(
                [category.id for category in categories]
            )
            sections = [
                CategoryWithRecommendations(
                    category=category,
                    recommendations=by_category.get(category.id, []),
                )
                for category in categories
            ]
            return profile, sections

    async def _claimable_username(self, uow: IUnitOfWork, base: str) -> str:
        if await uow.profiles.is_username_available(base):
            return base
        stem = base[: USERNAME_MAX_LENGTH - 5]
        for _ in range(_SUFFIX_ATTEMPTS):
            candidate = f"{stem}-{secrets.randbelow(10000):04d}"
            if await uow.profiles.is_username_available(candidate):
                return candidate
        raise UsernameTakenError(base)
