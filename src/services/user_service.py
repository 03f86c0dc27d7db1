"""User profile service — profile edits, account deletion and stats."""

from dataclasses import dataclass
from datetime import datetime, timezone
from logging import getLogger

from domain.model.errors import NotFoundError, ValidationError
from domain.model.user import User, UserProfile
from port.user_repository import UserRepository

logger = getLogger(__name__)


@dataclass
class UserStats:
    account_age_days: int
    provider: str
    email_verified: bool
    last_login: datetime | None
    profile_complete: bool


def update_profile(
    repo: UserRepository,
    user_id: str,
    display_name: str | None = None,
    profile: UserProfile | None = None,
) -> User:
    """Update the allow-listed profile fields of a user.

    ``profile`` is merged into the stored profile one key at a time; keys
    left as None keep their current value.

    Raises:
        ValidationError: display name is blank
        NotFoundError: user no longer exists
    """
    if display_name is not None:
        display_name = display_name.strip()
        if not display_name:
            raise ValidationError("Display name cannot be empty")

    user = repo.update_profile(user_id, display_name=display_name, profile=profile)
    if user is None:
        raise NotFoundError("User not found")
    return user


def delete_account(repo: UserRepository, user_id: str) -> None:
    """Delete the local user record. The identity provider's record is left alone.

    Raises:
        NotFoundError: user does not exist
    """
    if not repo.delete(user_id):
        raise NotFoundError("User not found")
    logger.info("User account deleted", extra={"userId": user_id})


def get_stats(user: User, now: datetime | None = None) -> UserStats:
    now = now or datetime.now(timezone.utc)
    created_at = user.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return UserStats(
        account_age_days=(now - created_at).days,
        provider=user.provider,
        email_verified=user.email_verified,
        last_login=user.last_login,
        profile_complete=user.profile.is_complete,
    )
