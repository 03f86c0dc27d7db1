"""Bearer authentication dependencies.

Every protected route resolves its caller through AuthenticationResolver:
a Firebase ID token first, a locally issued session JWT second. Clients
only ever see a uniform 401; the reason stays in the logs.
"""

import os
import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from adapter.token.jose_session_tokens import JoseSessionTokenIssuer
from api.dependencies import get_identity_verifier, get_user_repo
from domain.model.auth import ResolvedUser
from domain.model.errors import DuplicateUserError, UnauthenticatedError
from domain.model.user import User
from port.identity_verifier import IdentityTokenVerifier
from port.session_tokens import SessionTokenIssuer
from port.user_repository import UserRepository
from services.authentication_resolver import AuthenticationResolver

logger = logging.getLogger(__name__)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )

_session_tokens = JoseSessionTokenIssuer(JWT_SECRET_KEY)

security = HTTPBearer(auto_error=False)


def unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_token_issuer() -> SessionTokenIssuer:
    return _session_tokens


def get_auth_resolver(
    repo: UserRepository = Depends(get_user_repo),
    identity_verifier: IdentityTokenVerifier = Depends(get_identity_verifier),
    session_tokens: SessionTokenIssuer = Depends(get_session_token_issuer),
) -> AuthenticationResolver:
    return AuthenticationResolver(identity_verifier, session_tokens, repo)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Extract the bearer token. Raises 401 before any store dependency is built."""
    if not credentials:
        raise unauthorized("Not authenticated")
    return credentials.credentials


def get_resolved_user(
    token: str = Depends(get_bearer_token),
    resolver: AuthenticationResolver = Depends(get_auth_resolver),
) -> ResolvedUser:
    """Resolve the caller from the Authorization header. Raises 401 if not authenticated.

    Dependencies are solved in declaration order, so a request without a
    token is rejected before the resolver (and the user store) is created.
    """
    try:
        return resolver.resolve(token)
    except UnauthenticatedError as e:
        logger.info(
            "Authentication failed",
            extra={"reason": e.reason, "failures": e.failures},
        )
        raise unauthorized()
    except DuplicateUserError:
        # Provisioning collided with an unrelated record (e.g. its email)
        logger.warning("Authentication failed: identity could not be provisioned")
        raise unauthorized()


def get_current_user_required(
    resolved: ResolvedUser = Depends(get_resolved_user),
) -> User:
    """Get current authenticated user (required)."""
    return resolved.user
