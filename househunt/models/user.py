"""
Accounts for listing owners and tenants, with bcrypt password storage.
"""

from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from househunt.database import Base
from passlib.context import CryptContext
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from househunt.models.listing import Listing

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """Closed set of roles; fixed at registration."""
    OWNER = "owner"
    TENANT = "tenant"


class User(Base):
    """Owners publish listings; tenants browse them."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        index=True,
        comment="User role for access control"
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True
    )

    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Preferred or home location"
    )

    listings: Mapped[List["Listing"]] = relationship(
        "Listing",
        back_populates="owner",
        passive_deletes=True,
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        self.hashed_password = self.hash_password(password)

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER

    @property
    def is_tenant(self) -> bool:
        return self.role == UserRole.TENANT

    def owns(self, owner_id: uuid.UUID) -> bool:
        """Check whether this user is the owner referenced by a listing."""
        return self.id == owner_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "phone": self.phone,
            "location": self.location,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_summary(self) -> dict:
        """Public contact summary embedded in listing responses."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }
