from typing import Protocol

from domain.model.auth import IdentityClaims


class IdentityTokenVerifier(Protocol):
    def verify(self, token: str) -> IdentityClaims:
        """Verify an identity provider token. Raise InvalidTokenError if rejected."""
        ...
