"""
Listing model for rental properties.
Handles listing data with location, pricing, availability and ownership.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, Index, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from househunt.database import Base
from decimal import Decimal
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from househunt.models.user import User


class Listing(Base):
    """
    Rental listing owned by exactly one owner-role user.
    """

    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_listings_price_non_negative"),
        CheckConstraint("bedrooms >= 1", name="ck_listings_bedrooms_positive"),
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Listing location/address"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Monthly rent in local currency"
    )

    bedrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Number of bedrooms"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    image_url: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Image reference shown on listing cards"
    )

    contact: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Contact details for enquiries"
    )

    available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the listing is open to tenants"
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the owner who published this listing"
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="listings",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, title={self.title[:30]}, price={self.price})>"

    def validate_price(self) -> None:
        """
        Validate listing price.

        Raises:
            ValueError: If price is invalid
        """
        if self.price is None or self.price < 0:
            raise ValueError("Listing price cannot be negative")

        if self.price > Decimal('9999999999.99'):
            raise ValueError("Listing price exceeds maximum allowed value")

    def validate_bedrooms(self) -> None:
        """
        Validate number of bedrooms.

        Raises:
            ValueError: If bedroom count is invalid
        """
        if self.bedrooms is None or self.bedrooms < 1:
            raise ValueError("Listing must have at least one bedroom")

    def validate_all(self) -> None:
        self.validate_price()
        self.validate_bedrooms()

    def to_dict(self, include_owner: bool = True) -> dict:
        """
        Convert listing to dictionary.

        Args:
            include_owner: Whether to embed the owner's contact summary

        Returns:
            Dictionary representation of listing
        """
        result = {
            "id": str(self.id),
            "title": self.title,
            "location": self.location,
            "price": float(self.price),
            "bedrooms": self.bedrooms,
            "description": self.description,
            "image_url": self.image_url,
            "contact": self.contact,
            "available": self.available,
            "owner_id": str(self.owner_id),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_owner and self.owner:
            result["owner"] = self.owner.to_summary()

        return result


# Composite index for the default browse query (available listings, newest first)
available_created_index = Index(
    'idx_listings_available_created',
    Listing.available,
    Listing.created_at.desc()
)

# Composite index for an owner's own listings
owner_created_index = Index(
    'idx_listings_owner_created',
    Listing.owner_id,
    Listing.created_at.desc()
)
