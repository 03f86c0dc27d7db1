from datetime import datetime
from typing import Protocol

from domain.model.user import User, UserProfile


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise StoreUnavailableError when the backing store
    cannot be reached.
    """
    def create(
        self,
        email: str | None,
        display_name: str,
        password_hash: str | None = None,
        provider: str = 'email',
        federated_id: str | None = None,
        photo_url: str | None = None,
        email_verified: bool = False,
    ) -> User:
        """Create a new user. Raise DuplicateUserError if a set email or federated id is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_federated_id(self, federated_id: str) -> User | None:
        """Find a user by identity provider subject id. Return User or None if not found."""
        ...

    def update_profile(
        self,
        user_id: str,
        display_name: str | None = None,
        profile: UserProfile | None = None,
    ) -> User | None:
        """Update allow-listed fields. Profile fields that are None keep their stored value."""
        ...

    def delete(self, user_id: str) -> bool:
        """Delete a user. Return True if a record was removed."""
        ...

    def update_last_login(self, user_id: str) -> datetime | None:
        """Stamp the last login time. Return the timestamp written, or None."""
        ...
