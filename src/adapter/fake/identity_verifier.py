"""In-memory implementation of IdentityTokenVerifier for testing."""

from domain.model.auth import IdentityClaims
from domain.model.errors import InvalidTokenError


class FakeIdentityVerifier:
    """Accepts exactly the tokens registered with ``add_token``."""

    def __init__(self):
        self.tokens: dict[str, IdentityClaims] = {}
        self.calls: list[str] = []

    def add_token(self, token: str, claims: IdentityClaims) -> None:
        self.tokens[token] = claims

    def verify(self, token: str) -> IdentityClaims:
        self.calls.append(token)
        claims = self.tokens.get(token)
        if claims is None:
            raise InvalidTokenError("identity token rejected: unknown token")
        return claims
