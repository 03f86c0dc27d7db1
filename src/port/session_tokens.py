from typing import Protocol


class SessionTokenIssuer(Protocol):
    def issue(self, user_id: str) -> str:
        """Issue a signed session token for the user."""
        ...

    def verify(self, token: str) -> str:
        """Return the user id embedded in the token. Raise InvalidTokenError if rejected."""
        ...
