"""
FastAPI dependency injection utilities for authentication and database sessions.
Provides the access gate (token -> user) and the role gate built on top of it.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from househunt.database import get_db
from househunt.models.user import User, UserRole
from househunt.services.auth import AuthService
from househunt.services.listing import ListingService
from househunt.services.token import TokenService, get_token_service
from househunt.utils.auth import ensure_role
from househunt.utils.exceptions import UnauthorizedError


# HTTP Bearer token security scheme; missing headers are reported by get_current_user
security = HTTPBearer(auto_error=False)


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> AuthService:
    return AuthService(db, token_service)


async def get_listing_service(db: AsyncSession = Depends(get_db)) -> ListingService:
    return ListingService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Args:
        credentials: HTTP Bearer credentials
        auth_service: Authentication service

    Returns:
        Current User object

    Raises:
        UnauthorizedError: If no token is provided
        InvalidTokenError: If the token is invalid, expired or its user is gone
    """
    if not credentials or not credentials.credentials:
        raise UnauthorizedError()

    return await auth_service.get_current_user(credentials.credentials)


def require_role(required_role: UserRole):
    """
    Create a dependency that admits only users holding a role.

    The returned dependency runs the access gate first, so a request without a
    valid token is rejected with 401 before any role check happens.

    Args:
        required_role: Role the endpoint is restricted to

    Returns:
        Dependency function resolving to the authorized user
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        return ensure_role(current_user, required_role)

    return role_checker


require_owner = require_role(UserRole.OWNER)
