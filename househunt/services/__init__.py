"""
Service layer for business logic implementation.
Contains services for tokens, authentication, listing management and error handling.
"""

from .token import TokenService, get_token_service
from .auth import AuthService
from .listing import ListingService
from .error_handler import ErrorHandlerService

__all__ = [
    "TokenService",
    "get_token_service",
    "AuthService",
    "ListingService",
    "ErrorHandlerService"
]
