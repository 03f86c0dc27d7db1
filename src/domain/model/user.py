from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class UserProfile:
    """Free-form profile details a user can edit."""
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    date_of_birth: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.bio and self.location)


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    display_name: str
    email: str | None
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None
    password_hash: str | None = None
    provider: str = 'email'
    federated_id: str | None = None
    photo_url: str | None = None
    email_verified: bool = False
    is_active: bool = True
    profile: UserProfile = field(default_factory=UserProfile)
