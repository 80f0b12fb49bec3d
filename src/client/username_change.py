"""Client-side state for the "change username" form."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional

from client.availability import UsernameAvailabilityChecker
from client.backend import BackendClient
from core.config import settings
from domain.entities.username import (
    AvailabilityResult,
    CooldownInfo,
    UsernameUpdateReason,
    UsernameUpdateResult,
    compute_cooldown,
    cooldown_message,
)


class UsernameChangeController:
    """Combines availability checking, cooldown gating and the submit call.

    The local username is replaced only after the server confirms the
    change; a failed or rejected submit leaves it untouched.
    """

    def __init__(
        self,
        backend: BackendClient,
        current_username: str,
        username_changed_at: Optional[datetime] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        debounce_ms: int = settings.username_check_debounce_ms,
        timeout: float = settings.username_check_timeout_seconds,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self.current_username = current_username
        self.username_changed_at = username_changed_at
        self.value = current_username
        self._submitting = False
        self.checker = UsernameAvailabilityChecker(
            backend.check_username, debounce_ms=debounce_ms, timeout=timeout
        )

    @property
    def cooldown(self) -> CooldownInfo:
        # Recomputed on every read; "now" keeps moving.
        return compute_cooldown(self.username_changed_at, self._clock())

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def input_disabled(self) -> bool:
        return not self.cooldown.can_change or self._submitting

    @property
    def availability(self) -> AvailabilityResult:
        return self.checker.result

    @property
    def can_submit(self) -> bool:
        if self.input_disabled or self.value == self.current_username:
            return False
        return self.availability.allows_submit

    @property
    def status_message(self) -> str:
        cooldown = self.cooldown
        if not cooldown.can_change:
            return cooldown_message(cooldown)
        if self.value == self.current_username:
            return ""
        return self.availability.message

    def edit(self, raw: str) -> None:
        self.value = raw.lower()
        if self.value == self.current_username:
            self.checker.reset()
            return
        self.checker.update(self.value)

    async def submit(self) -> UsernameUpdateResult:
        """Send the change to the server.

        Raises RuntimeError on a second concurrent submit; BackendError from
        the transport propagates with local state unchanged.
        """
        if self._submitting:
            raise RuntimeError("A username change is already in progress")

        self._submitting = True
        try:
            result = await self._backend.update_username(self.value)
            if result.success and result.reason == UsernameUpdateReason.UPDATED:
                self.current_username = result.username or self.value
                self.username_changed_at = result.username_changed_at or self._clock()
                self.value = self.current_username
                self.checker.reset()
            return result
        finally:
            self._submitting = False

    async def aclose(self) -> None:
        await self.checker.aclose()
