"""python-jose implementation of SessionTokenIssuer."""

from datetime import datetime, timedelta, timezone
from logging import getLogger

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError

logger = getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = 7


class JoseSessionTokenIssuer:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = JWT_ALGORITHM,
        expiration: timedelta = timedelta(days=JWT_EXPIRATION_DAYS),
    ):
        if not secret_key:
            raise ValueError("Session token secret key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expiration = expiration

    def issue(self, user_id: str) -> str:
        """Create a signed token whose subject is the user id."""
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expiration,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify signature and expiry and return the user id.

        Malformed, tampered and expired tokens all raise InvalidTokenError.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError(f"session token rejected: {e}") from e

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError("session token rejected: missing subject")
        return user_id
