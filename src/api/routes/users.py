"""User profile routes.

- GET /users/profile: current user with profile details
- PUT /users/profile: update display name and profile fields
- DELETE /users/account: delete the local account
- GET /users/stats: account statistics
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_user_repo
from api.models import (
    ProfileUpdateRequest,
    StatsEnvelope,
    StatsResponse,
    UserEnvelope,
    UserResponse,
)
from api.security import get_current_user_required
from domain.model.errors import NotFoundError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserEnvelope)
def get_profile(current_user: User = Depends(get_current_user_required)):
    return UserEnvelope(user=UserResponse.from_domain(current_user))


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Update the current user's display name and/or profile fields."""
    try:
        user = user_service.update_profile(
            repo,
            current_user.id,
            display_name=request.display_name,
            profile=request.profile.to_domain() if request.profile else None,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    return UserEnvelope(message="Profile updated successfully", user=UserResponse.from_domain(user))


@router.delete("/account")
def delete_account(
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Delete the current user's account. Irreversible."""
    try:
        user_service.delete_account(repo, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    return {"message": "Account deleted successfully"}


@router.get("/stats", response_model=StatsEnvelope)
def get_stats(current_user: User = Depends(get_current_user_required)):
    stats = user_service.get_stats(current_user)
    return StatsEnvelope(stats=StatsResponse(
        account_age=f"{stats.account_age_days} days",
        provider=stats.provider,
        email_verified=stats.email_verified,
        last_login=stats.last_login,
        profile_complete=stats.profile_complete,
    ))
