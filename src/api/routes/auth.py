"""Authentication routes (register, login, Firebase sync, profile, logout)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_repo
from api.models import (
    AuthResponse,
    FirebaseAuthRequest,
    LoginRequest,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)
from api.security import (
    get_auth_resolver,
    get_current_user_required,
    get_session_token_issuer,
    unauthorized,
)
from domain.model.errors import DuplicateError, DuplicateUserError, UnauthenticatedError, ValidationError
from domain.model.user import User
from port.session_tokens import SessionTokenIssuer
from port.user_repository import UserRepository
from services import auth_service
from services.authentication_resolver import AuthenticationResolver


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    session_tokens: SessionTokenIssuer = Depends(get_session_token_issuer),
):
    """Register a new user with email and password.

    Raises:
        HTTPException: 409 if email already exists, 400 if validation fails
    """
    try:
        user = auth_service.register(repo, request.email, request.password, request.display_name)
    except DuplicateError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("User registered", extra={"userId": user.id, "email": user.email})

    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.from_domain(user),
        token=session_tokens.issue(user.id),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    session_tokens: SessionTokenIssuer = Depends(get_session_token_issuer),
):
    """Login with email and password and return a session token.

    Raises:
        HTTPException: 401 if credentials are invalid
    """
    try:
        user = auth_service.authenticate(repo, request.email, request.password)
    except ValidationError:
        raise unauthorized("Invalid credentials")

    logger.info("User logged in", extra={"userId": user.id, "email": user.email})

    return AuthResponse(
        message="Login successful",
        user=UserResponse.from_domain(user),
        token=session_tokens.issue(user.id),
    )


@router.post("/firebase", response_model=AuthResponse)
def firebase_sync(
    request: FirebaseAuthRequest,
    resolver: AuthenticationResolver = Depends(get_auth_resolver),
    session_tokens: SessionTokenIssuer = Depends(get_session_token_issuer),
):
    """Verify a Firebase ID token, provision the user on first sight, and
    exchange it for a session token.

    This is the only entrypoint that stamps ``last_login`` for Firebase users.

    Raises:
        HTTPException: 400 if no token given, 401 if it is rejected
    """
    if not request.id_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Firebase ID token required")

    try:
        resolved = auth_service.sync_identity(resolver, request.id_token)
    except UnauthenticatedError as e:
        logger.info("Firebase sync failed", extra={"reason": e.reason, "failures": e.failures})
        raise unauthorized("Firebase authentication failed")
    except DuplicateUserError:
        logger.warning("Firebase sync failed: identity could not be provisioned")
        raise unauthorized("Firebase authentication failed")

    user = resolved.user
    logger.info(
        "Firebase sync succeeded",
        extra={"userId": user.id, "created": resolved.created, "method": resolved.method.value},
    )

    return AuthResponse(
        message="Firebase authentication successful",
        user=UserResponse.from_domain(user),
        token=session_tokens.issue(user.id),
    )


@router.get("/profile", response_model=UserEnvelope)
def get_profile(current_user: User = Depends(get_current_user_required)):
    """Get the current authenticated user."""
    return UserEnvelope(user=UserResponse.from_domain(current_user))


@router.post("/logout")
async def logout():
    """Logout. Session tokens are stateless; the client discards its token."""
    return {"message": "Logout successful"}
