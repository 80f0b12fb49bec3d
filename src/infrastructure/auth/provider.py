"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """Represents a user extracted from an auth token.

    ``username`` is the handle requested at signup (Supabase
    ``user_metadata.username``); it only seeds the profile on first login.
    """

    id: UUID
    email: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Validate a bearer token, returning None if invalid or expired."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create a signed token for a user."""
        ...
