"""Auth service — registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import bcrypt

from domain.model.auth import ResolvedUser
from domain.model.errors import DuplicateUserError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository
from services.authentication_resolver import AuthenticationResolver

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 6


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def register(repo: UserRepository, email: str, password: str, display_name: str) -> User:
    """Register a new local-credential user.

    Returns the created User domain object.

    Raises:
        DuplicateUserError: email already registered
        ValidationError: password or display name rejected
    """
    if repo.get_by_email(email):
        raise DuplicateUserError("Email already registered")

    display_name = display_name.strip()
    if not display_name:
        raise ValidationError("Display name is required")
    _validate_password(password)

    return repo.create(
        email=email,
        display_name=display_name,
        password_hash=_hash_password(password),
        provider='email',
    )


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Federated-only accounts have no password hash and never match.
    Doesn't reveal whether the email exists.

    Raises:
        ValidationError: invalid credentials (deliberately vague)
    """
    user = repo.get_by_email(email)
    if not user or not user.password_hash or not _verify_password(password, user.password_hash):
        raise ValidationError("Invalid credentials")

    touched_at = repo.update_last_login(user.id)
    if touched_at is not None:
        user.last_login = touched_at
    return user


def sync_identity(resolver: AuthenticationResolver, id_token: str) -> ResolvedUser:
    """Sign-in sync: resolve the token, provisioning if needed, and stamp the login.

    Raises:
        UnauthenticatedError: token rejected
    """
    return resolver.resolve(id_token, touch=True)
