"""Category domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Category:
    """A titled section of recommendation cards on a profile page."""

    user_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    position: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
