"""
Pydantic schemas for request/response validation.
"""

from .auth import (
    LoginRequest,
    CurrentUserResponse,
    AuthResponse
)

from .user import (
    UserBase,
    UserCreate,
    UserProfileUpdate,
    PasswordChangeRequest,
    UserResponse,
    OwnerSummary
)

from .listing import (
    ListingBase,
    ListingCreate,
    ListingUpdate,
    ListingResponse,
    ListingListResponse,
    ListingDetailResponse,
    LocationListResponse,
    MessageResponse
)

__all__ = [
    # Authentication
    "LoginRequest",
    "CurrentUserResponse",
    "AuthResponse",

    # User
    "UserBase",
    "UserCreate",
    "UserProfileUpdate",
    "PasswordChangeRequest",
    "UserResponse",
    "OwnerSummary",

    # Listing
    "ListingBase",
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",
    "ListingListResponse",
    "ListingDetailResponse",
    "LocationListResponse",
    "MessageResponse",
]
