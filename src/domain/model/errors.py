"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateUserError(DuplicateError):
    """A user with the same email or federated id already exists."""


class StoreUnavailableError(DomainError):
    """The user store could not be reached."""


class InvalidTokenError(DomainError):
    """A token verifier rejected a bearer token.

    Covers malformed, tampered, expired and otherwise unacceptable tokens.
    """


class UnauthenticatedError(DomainError):
    """No acting user could be established for a request.

    ``reason`` is a short internal label; ``failures`` holds the rejection
    messages of each verification strategy that was tried. Neither is meant
    for the client.
    """

    def __init__(self, reason: str, failures: list[str] | None = None):
        self.reason = reason
        self.failures = failures or []
        super().__init__(reason)
