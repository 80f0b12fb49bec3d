"""Username availability lookup and the atomic username update transaction."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import (
    AppException,
    ProfileNotFoundError,
    UsernameCheckFailedError,
    UsernameTakenError,
)
from domain.entities.profile import Profile
from domain.entities.username import (
    MSG_AVAILABLE,
    MSG_TAKEN,
    MSG_UNCHANGED,
    MSG_UPDATED,
    AvailabilityResult,
    UsernameUpdateReason,
    UsernameUpdateResult,
    compute_cooldown,
    cooldown_message,
    normalize_username,
    username_violation,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class UsernameService:
    """Service layer for the username lifecycle.

    The availability check is a hint for the UI. ``update_username`` is the
    only place a username is committed; it re-checks every rule inside a
    single transaction with the profile row locked.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    async def check_availability(self, username: str) -> AvailabilityResult:
        """Validate ``username`` and look up whether it is free.

        "Taken" is a normal negative result. Only an infrastructure failure
        raises (UsernameCheckFailedError).
        """
        candidate = normalize_username(username)
        violation = username_violation(candidate)
        if violation:
            return AvailabilityResult.rejected(violation)

        try:
            async with self._uow_factory() as uow:
                available = await uow.profiles.is_username_available(candidate)
        except AppException:
            raise
        except Exception as exc:
            logger.exception("username_check_failed", username=candidate)
            raise UsernameCheckFailedError() from exc

        if available:
            return AvailabilityResult(available=True, message=MSG_AVAILABLE)
        return AvailabilityResult.rejected(MSG_TAKEN)

    async def update_username(self, user_id: UUID, new_username: str) -> UsernameUpdateResult:
        """Change a user's username, enforcing syntax, cooldown and uniqueness."""
        candidate = normalize_username(new_username)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_for_update(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            if candidate == profile.username:
                return self._result(profile, True, MSG_UNCHANGED, UsernameUpdateReason.UNCHANGED)

            violation = username_violation(candidate)
            if violation:
                return self._result(profile, False, violation, UsernameUpdateReason.INVALID)

            now = self._clock()
            cooldown = compute_cooldown(profile.username_changed_at, now)
            if not cooldown.can_change:
                return self._result(
                    profile,
                    False,
                    cooldown_message(cooldown),
                    UsernameUpdateReason.COOLDOWN,
                )

            owner = await uow.profiles.get_by_username(candidate)
            if owner and owner.id != profile.id:
                return self._result(profile, False, MSG_TAKEN, UsernameUpdateReason.TAKEN)

            try:
                updated = await uow.profiles.set_username(profile.id, candidate, now)
                await uow.commit()
            except UsernameTakenError:
                # Lost the race to a concurrent claim between lookup and write
                await uow.rollback()
                logger.info("username_update_race_lost", user_id=str(user_id), username=candidate)
                return self._result(profile, False, MSG_TAKEN, UsernameUpdateReason.TAKEN)

            logger.info(
                "username_updated",
                user_id=str(user_id),
                old_username=profile.username,
                new_username=updated.username,
            )
            return self._result(updated, True, MSG_UPDATED, UsernameUpdateReason.UPDATED)

    @staticmethod
    def _result(
        profile: Profile,
        success: bool,
        message: str,
        reason: UsernameUpdateReason,
    ) -> UsernameUpdateResult:
        return UsernameUpdateResult(
            success=success,
            message=message,
            reason=reason,
            username=profile.username,
            username_changed_at=profile.username_changed_at,
        )
