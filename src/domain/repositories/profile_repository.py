"""Profile repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def get_for_update(self, id: UUID) -> Profile | None:
        """Get a profile by ID, locking the row for the current transaction."""
        ...

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by its (normalized) username."""
        ...

    async def is_username_available(self, username: str) -> bool:
        """Check whether no profile holds ``username``.

        Only answers yes/no; never loads the owning profile.
        """
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update display fields of an existing profile (never the username)."""
        ...

    async def set_username(
        self, id: UUID, username: str, changed_at: datetime
    ) -> Profile:
        """Write ``username`` and ``username_changed_at`` in one statement.

        Raises UsernameTakenError when the unique index rejects the value.
        """
        ...
