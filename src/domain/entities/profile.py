"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_TEXT_COLOR = "#111827"
DEFAULT_USERNAME_COLOR = "#111827"


@dataclass
class Profile:
    """Domain entity for a user's public page (one per Supabase account)."""

    username: str
    id: UUID = field(default_factory=uuid4)
    email: str = ""
    username_changed_at: datetime | None = None
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    background_color: str = DEFAULT_BACKGROUND_COLOR
    text_color: str = DEFAULT_TEXT_COLOR
    username_color: str = DEFAULT_USERNAME_COLOR
    social_links: dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
        self.background_color = self.background_color.upper()
        self.text_color = self.text_color.upper()
        self.username_color = self.username_color.upper()
