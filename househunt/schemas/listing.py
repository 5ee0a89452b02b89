"""
Pydantic schemas for listing requests and responses.
Handles listing CRUD payloads and the response envelopes used by the listing endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from househunt.schemas.user import OwnerSummary

MAX_PRICE = Decimal('9999999999.99')


def _clean_required_text(v: Optional[str], field_name: str) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return v.strip()


class ListingBase(BaseModel):
    """Base listing schema with the fields an owner provides."""

    title: str = Field(
        ...,
        max_length=255,
        description="Listing title",
        examples=["Sunny 2BR flat near the park"]
    )

    location: str = Field(
        ...,
        max_length=255,
        description="Listing location/address",
        examples=["Koramangala, Bangalore"]
    )

    price: Decimal = Field(
        ...,
        gt=0,
        le=MAX_PRICE,
        description="Monthly rent in local currency",
        examples=[6500]
    )

    bedrooms: int = Field(
        ...,
        ge=1,
        le=50,
        description="Number of bedrooms",
        examples=[2]
    )

    description: str = Field(
        ...,
        max_length=5000,
        description="Detailed listing description"
    )

    contact: str = Field(
        ...,
        max_length=255,
        description="Contact details for enquiries",
        examples=["+91 98765 43210"]
    )

    @field_validator('title', 'location', 'description', 'contact')
    @classmethod
    def validate_text(cls, v, info):
        """Reject blank values and trim whitespace."""
        return _clean_required_text(v, info.field_name.capitalize())


class ListingCreate(ListingBase):
    """Schema for creating a new listing."""

    image_url: Optional[str] = Field(
        None,
        max_length=1024,
        description="Image reference; a placeholder is used when omitted"
    )


class ListingUpdate(BaseModel):
    """
    Schema for updating an existing listing.

    Omitted or null fields keep their stored values. Ownership cannot be changed.
    """

    title: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    price: Optional[Decimal] = Field(None, gt=0, le=MAX_PRICE)
    bedrooms: Optional[int] = Field(None, ge=1, le=50)
    description: Optional[str] = Field(None, max_length=5000)
    image_url: Optional[str] = Field(None, max_length=1024)
    contact: Optional[str] = Field(None, max_length=255)
    available: Optional[bool] = Field(
        None,
        description="Whether the listing is open to tenants"
    )

    @field_validator('title', 'location', 'description', 'contact')
    @classmethod
    def validate_text(cls, v, info):
        return _clean_required_text(v, info.field_name.capitalize())


class ListingResponse(BaseModel):
    """Schema for a listing as returned to clients."""

    id: str
    title: str
    location: str
    price: float
    bedrooms: int
    description: str
    image_url: str
    contact: str
    available: bool
    owner_id: str
    owner: Optional[OwnerSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ListingListResponse(BaseModel):
    """Envelope for listing collections."""

    success: bool = True
    count: int = Field(..., description="Number of listings returned")
    data: List[ListingResponse]


class ListingDetailResponse(BaseModel):
    """Envelope for a single listing."""

    success: bool = True
    data: ListingResponse


class LocationListResponse(BaseModel):
    """Envelope for the distinct locations of available listings."""

    success: bool = True
    data: List[str]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
