"""Authentication resolver — establishes the acting user for a bearer token.

Strategies are tried in a fixed order, once each:

    identity token (Firebase)  → find or provision the user by federated id
    session token (local JWT)  → find an existing, active user by id

The first strategy that verifies the token decides the outcome. When both
reject it, a single UnauthenticatedError is raised carrying both reasons
for the logs. Store failures are not authentication failures and propagate
as StoreUnavailableError.
"""

from logging import getLogger

from domain.model.auth import AuthMethod, IdentityClaims, ResolvedUser
from domain.model.errors import DuplicateUserError, InvalidTokenError, UnauthenticatedError
from domain.model.user import User
from port.identity_verifier import IdentityTokenVerifier
from port.session_tokens import SessionTokenIssuer
from port.user_repository import UserRepository

logger = getLogger(__name__)

# Used when the identity carries neither a name nor an email (phone, anonymous)
DEFAULT_DISPLAY_NAME = 'User'


class AuthenticationResolver:
    def __init__(
        self,
        identity_verifier: IdentityTokenVerifier,
        session_tokens: SessionTokenIssuer,
        repo: UserRepository,
    ):
        self.identity_verifier = identity_verifier
        self.session_tokens = session_tokens
        self.repo = repo

    def resolve(self, token: str | None, touch: bool = False) -> ResolvedUser:
        """Resolve a bearer token to a user.

        Args:
            token: Raw bearer token, without the ``Bearer`` prefix
            touch: Stamp ``last_login`` on the resolved user. Only the
                explicit sign-in sync entrypoint passes True.

        Raises:
            UnauthenticatedError: no token, both strategies rejected it, or
                the session token points at a missing or inactive user
            StoreUnavailableError: the user store could not be reached
            DuplicateUserError: provisioning collided with another record
                that is not the same federated identity
        """
        if not token:
            raise UnauthenticatedError("no token")

        try:
            claims = self.identity_verifier.verify(token)
        except InvalidTokenError as identity_error:
            resolved = self._resolve_session_token(token, identity_error)
        else:
            resolved = self._resolve_identity(claims)

        if touch:
            touched_at = self.repo.update_last_login(resolved.user.id)
            if touched_at is not None:
                resolved.user.last_login = touched_at
        return resolved

    def _resolve_identity(self, claims: IdentityClaims) -> ResolvedUser:
        user = self.repo.get_by_federated_id(claims.subject_id)
        created = False
        if user is None:
            user, created = self._provision(claims)
        return ResolvedUser(user=user, method=AuthMethod.IDENTITY_TOKEN, claims=claims, created=created)

    def _provision(self, claims: IdentityClaims) -> tuple[User, bool]:
        """Create the local record for a first-seen federated identity.

        A concurrent request may have created it between our lookup and
        insert; the unique index rejects the second insert and we adopt
        the winner's record.
        """
        try:
            user = self.repo.create(
                email=claims.email,
                display_name=claims.display_name or claims.email or DEFAULT_DISPLAY_NAME,
                provider=claims.provider,
                federated_id=claims.subject_id,
                photo_url=claims.photo_url,
                email_verified=claims.email_verified,
            )
        except DuplicateUserError:
            user = self.repo.get_by_federated_id(claims.subject_id)
            if user is None:
                logger.warning(
                    "Provisioning collided with an unrelated user",
                    extra={"federatedId": claims.subject_id, "email": claims.email},
                )
                raise
            logger.info(
                "Provisioning raced, adopted existing user",
                extra={"userId": user.id, "federatedId": claims.subject_id},
            )
            return user, False

        logger.info(
            "Provisioned user from identity token",
            extra={"userId": user.id, "federatedId": claims.subject_id, "provider": user.provider},
        )
        return user, True

    def _resolve_session_token(self, token: str, identity_error: InvalidTokenError) -> ResolvedUser:
        try:
            user_id = self.session_tokens.verify(token)
        except InvalidTokenError as session_error:
            failures = [str(identity_error), str(session_error)]
            logger.info("Bearer token rejected by all strategies", extra={"failures": failures})
            raise UnauthenticatedError("invalid token", failures=failures) from session_error

        user = self.repo.get_by_id(user_id)
        # is_active is only enforced here, not on the identity token path
        if user is None or not user.is_active:
            logger.info("Session token user not found or inactive", extra={"userId": user_id})
            raise UnauthenticatedError("user not found or inactive")
        return ResolvedUser(user=user, method=AuthMethod.SESSION_TOKEN)
