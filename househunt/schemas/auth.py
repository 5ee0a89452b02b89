"""
Pydantic schemas for authentication requests and responses.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from househunt.models.user import UserRole
from househunt.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@househunt.app"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class CurrentUserResponse(UserResponse):
    """Current user response with role-derived permissions."""

    permissions: list[str] = Field(
        default_factory=list,
        validate_default=True,
        description="Operations available to the user's role"
    )

    @field_validator('permissions', mode='before')
    @classmethod
    def set_permissions(cls, v, info):
        """Set permissions based on user role."""
        role = info.data.get('role')
        if role == UserRole.OWNER:
            return [
                "browse_listings",
                "create_listing",
                "update_own_listing",
                "delete_own_listing",
                "view_own_listings"
            ]
        if role == UserRole.TENANT:
            return ["browse_listings"]
        return []


class AuthResponse(BaseModel):
    """Response returned by registration and login."""

    success: bool = True
    user: CurrentUserResponse
    access_token: str = Field(
        ...,
        description="JWT access token"
    )
    token_type: str = Field(
        default="bearer",
        description="Token type"
    )
    expires_in: int = Field(
        ...,
        description="Access token lifetime in seconds"
    )
