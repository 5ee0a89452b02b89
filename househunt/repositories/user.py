"""
User repository: the credential store.
Provides lookups by id, email and credential, plus registration and profile writes.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from househunt.repositories.base import BaseRepository
from househunt.models.user import User
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts with password hashing on write.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password, name, role
                      Optional: phone, location

        Returns:
            Created user instance

        Raises:
            ValueError: If the email is taken or the password is too short
        """
        data = dict(user_data)
        email = data["email"].lower().strip()

        existing_user = await self.get_by_email(email)
        if existing_user:
            raise ValueError(f"User with email {email} already exists")

        password = data.pop("password")
        create_data = {
            **data,
            "email": email,
            "hashed_password": User.hash_password(password),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id}, role: {created_user.role.value})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(select(User).where(User.email == normalized_email))
            user = result.scalar_one_or_none()

            if not user:
                logger.debug(f"User with email {email} not found")

            return user
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Look a user up by credential.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            User instance if the credential matches, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def check_email_availability(self, email: str) -> bool:
        return await self.get_by_email(email) is None

    async def update_password(self, user: User, new_password: str) -> User:
        """
        Update user's password with proper hashing.

        Raises:
            ValueError: If password validation fails
        """
        updated_user = await self.update(user, {"hashed_password": User.hash_password(new_password)})
        logger.info(f"Password updated for user: {updated_user.email}")
        return updated_user

    async def update_location(self, user: User, location: Optional[str]) -> User:
        updated_user = await self.update(user, {"location": location})
        logger.info(f"Location updated for user: {updated_user.email}")
        return updated_user
