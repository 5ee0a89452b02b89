"""
Authentication service for registration, login and token resolution.
Issues access tokens through the token service and maps every token or
credential failure onto the API's authentication errors.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from househunt.repositories.user import UserRepository
from househunt.models.user import User
from househunt.schemas.user import UserCreate
from househunt.services.token import TokenService, get_token_service
from househunt.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    DuplicateResourceError,
    ValidationError
)
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing accounts and access tokens.
    """

    def __init__(self, db_session: AsyncSession, token_service: Optional[TokenService] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.token_service = token_service or get_token_service()

    async def register(self, user_data: UserCreate) -> Tuple[User, str]:
        """
        Register a new account and issue its first access token.

        Args:
            user_data: Validated registration payload

        Returns:
            Tuple of (user, access_token)

        Raises:
            DuplicateResourceError: If the email is already registered
        """
        if not await self.user_repo.check_email_availability(user_data.email):
            logger.info(f"Registration rejected, email already registered: {user_data.email}")
            raise DuplicateResourceError("User", user_data.email)

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except ValueError as e:
            # Lost a race with a concurrent registration, or the password was rejected
            if "already exists" in str(e):
                raise DuplicateResourceError("User", user_data.email)
            raise ValidationError(str(e))

        token = self.token_service.issue(user.id)
        logger.info(f"User registered: {user.email} (role: {user.role.value})")
        return user, token

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        if not email or not email.strip() or not password:
            raise InvalidCredentialsError()

        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and issue an access token.

        Returns:
            Tuple of (user, access_token)
        """
        user = await self.authenticate_user(email, password)
        return user, self.token_service.issue(user.id)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve an access token to the user it was issued for.

        Args:
            token: JWT access token

        Returns:
            Current User object

        Raises:
            InvalidTokenError: If the token is invalid, expired, or its user no longer exists
        """
        user_id = self.token_service.verify(token)

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            logger.info(f"Token subject no longer exists: {user_id}")
            raise InvalidTokenError()

        return user

    async def update_location(self, user: User, location: Optional[str]) -> User:
        return await self.user_repo.update_location(user, location)

    async def change_password(self, user: User, current_password: str, new_password: str) -> User:
        """
        Change a user's password after re-checking the current one.

        Raises:
            InvalidCredentialsError: If the current password is incorrect
            ValidationError: If the new password is unchanged
        """
        if not user.verify_password(current_password):
            raise InvalidCredentialsError("Current password is incorrect")

        if current_password == new_password:
            raise ValidationError("New password must be different from the current password")

        return await self.user_repo.update_password(user, new_password)
