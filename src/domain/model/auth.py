from dataclasses import dataclass
from enum import Enum

from domain.model.user import User

GOOGLE_SIGN_IN_PROVIDER = 'google.com'


class AuthMethod(str, Enum):
    IDENTITY_TOKEN = 'identity_token'
    SESSION_TOKEN = 'session_token'


@dataclass(frozen=True)
class IdentityClaims:
    """Verified claims extracted from an identity provider token."""
    subject_id: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    email_verified: bool = False
    sign_in_provider: str | None = None

    @property
    def provider(self) -> str:
        """Local provider tag for a user provisioned from these claims."""
        return 'google' if self.sign_in_provider == GOOGLE_SIGN_IN_PROVIDER else 'email'


@dataclass
class ResolvedUser:
    """The acting user of a request, plus how it was established."""
    user: User
    method: AuthMethod
    claims: IdentityClaims | None = None
    created: bool = False
