"""
Exception taxonomy for the House Hunt API.

Every error the API reports on purpose is an `APIException`: an HTTPException
that also carries a stable `error_code` for the JSON error envelope. Subclasses
only pin down status, code and wording.
"""

from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code_default: str = "API_ERROR"
    detail_default: str = "Request failed"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail or self.detail_default,
            headers=headers
        )
        self.error_code = error_code or self.error_code_default


class ValidationError(APIException):
    """Domain validation failure, reported like a request validation error."""

    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code_default = "VALIDATION_ERROR"
    detail_default = "Validation failed"

    def __init__(self, detail: Optional[str] = None, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code_default = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{detail} with ID: {resource_id}"
        super().__init__(detail)


class UnauthorizedError(APIException):
    """The request carries no usable credentials."""

    status_code_default = status.HTTP_401_UNAUTHORIZED
    error_code_default = "UNAUTHORIZED"
    detail_default = "No token, authorization denied"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIException):
    status_code_default = status.HTTP_403_FORBIDDEN
    error_code_default = "FORBIDDEN"
    detail_default = "Access forbidden"


class ConflictError(APIException):
    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = "CONFLICT"
    detail_default = "Resource conflict"


# Authentication
class InvalidCredentialsError(UnauthorizedError):
    detail_default = "Invalid email or password"


class InvalidTokenError(UnauthorizedError):
    """
    Token could not be accepted.

    Covers bad signatures, expiry, malformed tokens and tokens whose subject
    no longer exists; callers see one message for all of them.
    """

    detail_default = "Token is not valid"


class InsufficientRoleError(ForbiddenError):
    """Authenticated user lacks the role an operation requires."""

    def __init__(self, role_name: str):
        super().__init__(f"Access denied. {role_name.capitalize()} role required.")


# Listings
class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: Optional[str] = None):
        super().__init__("Listing", listing_id)


class ListingOwnershipError(ForbiddenError):
    """Listing belongs to a different owner."""

    def __init__(self, action: str = "modify"):
        super().__init__(f"Not authorized to {action} this listing")


class DuplicateResourceError(ConflictError):
    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")
