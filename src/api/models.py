"""Pydantic models for API request/response.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from domain.model.user import User, UserProfile

_http_url = TypeAdapter(AnyHttpUrl)


class ApiModel(BaseModel):
    """Base model accepting both field names and camelCase aliases."""
    model_config = ConfigDict(populate_by_name=True)


class ProfileResponse(ApiModel):
    """Editable profile details."""
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")


class UserResponse(ApiModel):
    """Public view of a user. Never carries the password hash."""
    id: str = Field(..., description="User ID")
    email: Optional[str] = None
    display_name: str = Field(..., alias="displayName")
    provider: str = Field(..., description="Sign-in provider: google or email")
    photo_url: Optional[str] = Field(None, alias="photoURL")
    email_verified: bool = Field(False, alias="emailVerified")
    profile: ProfileResponse = Field(default_factory=ProfileResponse)
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    last_login: Optional[datetime] = Field(None, alias="lastLogin")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            provider=user.provider,
            photo_url=user.photo_url,
            email_verified=user.email_verified,
            profile=ProfileResponse(
                bio=user.profile.bio,
                location=user.profile.location,
                website=user.profile.website,
                date_of_birth=user.profile.date_of_birth,
            ),
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )


class UserEnvelope(BaseModel):
    """Response wrapper for single-user endpoints."""
    message: Optional[str] = None
    user: UserResponse


class RegisterRequest(ApiModel):
    """Request model for user registration."""
    email: EmailStr
    password: str
    display_name: str = Field(..., alias="displayName", min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(ApiModel):
    """Request model for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class FirebaseAuthRequest(ApiModel):
    """Request model for Firebase sign-in sync."""
    id_token: Optional[str] = Field(None, alias="idToken")


class AuthResponse(BaseModel):
    """Response model for authentication."""
    message: str
    user: UserResponse
    token: str


class ProfileUpdate(ApiModel):
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = None
    date_of_birth: Optional[date] = Field(None, alias="dateOfBirth")

    @field_validator("bio", "location")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("website")
    @classmethod
    def check_website(cls, v: Optional[str]) -> Optional[str]:
        # Validated as an http(s) URL but stored as sent, not normalized
        if v is None:
            return None
        try:
            _http_url.validate_python(v)
        except ValidationError:
            raise ValueError("website must be a valid http(s) URL")
        return v

    def to_domain(self) -> UserProfile:
        return UserProfile(
            bio=self.bio,
            location=self.location,
            website=self.website,
            date_of_birth=self.date_of_birth.isoformat() if self.date_of_birth else None,
        )


class ProfileUpdateRequest(ApiModel):
    """Request model for profile updates. Only these fields can be changed."""
    display_name: Optional[str] = Field(None, alias="displayName")
    profile: Optional[ProfileUpdate] = None


class StatsResponse(ApiModel):
    account_age: str = Field(..., alias="accountAge")
    provider: str
    email_verified: bool = Field(..., alias="emailVerified")
    last_login: Optional[datetime] = Field(None, alias="lastLogin")
    profile_complete: bool = Field(..., alias="profileComplete")


class StatsEnvelope(BaseModel):
    stats: StatsResponse
