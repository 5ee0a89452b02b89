"""
Utility modules for the House Hunt API.
"""

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    InsufficientRoleError,
    ListingNotFoundError,
    ListingOwnershipError,
    DuplicateResourceError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "InsufficientRoleError",
    "ListingNotFoundError",
    "ListingOwnershipError",
    "DuplicateResourceError",
]
