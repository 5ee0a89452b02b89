"""
Pydantic schemas for user requests and responses.
Handles registration, profile updates and password changes.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from househunt.models.user import UserRole


def _check_password_strength(v: str) -> str:
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters long")

    if not any(c.isalpha() for c in v):
        raise ValueError("Password must contain at least one letter")

    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain at least one number")

    return v


class UserBase(BaseModel):
    """Base user schema with common fields."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        description="User's display name",
        examples=["Jane Doe"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@househunt.app"]
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class UserCreate(UserBase):
    """Schema for registering a new user."""

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="User's password (minimum 8 characters, letters and numbers)",
        examples=["securepassword123"]
    )

    role: UserRole = Field(
        UserRole.TENANT,
        description="Account role: owner publishes listings, tenant browses them",
        examples=["owner"]
    )

    phone: Optional[str] = Field(
        None,
        max_length=32,
        description="Contact phone number"
    )

    location: Optional[str] = Field(
        None,
        max_length=255,
        description="Preferred or home location"
    )

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        """Validate password strength."""
        return _check_password_strength(v)


class UserProfileUpdate(BaseModel):
    """Schema for profile updates; only the location is mutable."""

    location: Optional[str] = Field(
        None,
        max_length=255,
        description="New preferred or home location; null clears it, omitting it keeps it"
    )

    @field_validator('location')
    @classmethod
    def clean_location(cls, v):
        if v is not None:
            v = v.strip()
            return v or None
        return v


class PasswordChangeRequest(BaseModel):
    """Schema for changing the current user's password."""

    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return _check_password_strength(v)


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str
    name: str
    email: EmailStr
    role: UserRole
    phone: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OwnerSummary(BaseModel):
    """Owner contact details embedded in listing responses."""

    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
