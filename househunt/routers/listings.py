"""
Listing API endpoints: browsing with filters, owner listing management and locations.
All endpoints require authentication; writes additionally require the owner role.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional, List
from decimal import Decimal, InvalidOperation

from househunt.models.listing import Listing
from househunt.models.user import User
from househunt.repositories.listing import ListingSearchFilters
from househunt.services.listing import ListingService
from househunt.schemas.listing import (
    ListingCreate,
    ListingUpdate,
    ListingResponse,
    ListingListResponse,
    ListingDetailResponse,
    LocationListResponse,
    MessageResponse
)
from househunt.utils.dependencies import (
    get_current_user,
    get_listing_service,
    require_owner
)
from househunt.utils.exceptions import ValidationError
from househunt.schemas.error import (
    get_common_error_responses,
    get_owner_error_responses,
    get_mutation_error_responses
)


router = APIRouter(prefix="/listings", tags=["Listings"])


def _numeric_filter(name: str, raw: Optional[str], parse, minimum, maximum=None):
    """Blank values count as not supplied; anything else must be a number in range."""
    if raw is None or not raw.strip():
        return None

    raw = raw.strip()
    try:
        value = parse(raw)
    except (InvalidOperation, ValueError):
        value = None

    if value is None or (isinstance(value, Decimal) and not value.is_finite()):
        message = "Input should be a valid number"
    elif value < minimum or (maximum is not None and value > maximum):
        message = f"Input should be between {minimum} and {maximum}" if maximum is not None else f"Input should be at least {minimum}"
    else:
        return value

    raise ValidationError(
        "Request validation failed",
        field_errors=[{"field": f"query -> {name}", "message": message, "type": "query_filter", "input": raw}]
    )


def listing_filters(
    location: Optional[str] = Query(None, max_length=255, description="Case-insensitive location substring"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Minimum monthly rent"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Maximum monthly rent"),
    bedrooms: Optional[str] = Query(None, description="Exact number of bedrooms (1-50)")
) -> ListingSearchFilters:
    return ListingSearchFilters(
        location=location,
        min_price=_numeric_filter("minPrice", min_price, Decimal, 0),
        max_price=_numeric_filter("maxPrice", max_price, Decimal, 0),
        bedrooms=_numeric_filter("bedrooms", bedrooms, int, 1, 50)
    )


def _to_response(listing: Listing) -> ListingResponse:
    return ListingResponse.model_validate(listing.to_dict())


def _to_list_response(listings: List[Listing]) -> ListingListResponse:
    data = [_to_response(listing) for listing in listings]
    return ListingListResponse(count=len(data), data=data)


@router.get(
    "",
    response_model=ListingListResponse,
    status_code=status.HTTP_200_OK,
    summary="Browse available listings",
    description="List available listings, newest first, filtered by location, price range and bedrooms",
    responses=get_common_error_responses()
)
async def list_listings(
    filters: ListingSearchFilters = Depends(listing_filters),
    current_user: User = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingListResponse:
    listings = await listing_service.list_listings(current_user, filters)
    return _to_list_response(listings)


@router.get(
    "/my-listings",
    response_model=ListingListResponse,
    status_code=status.HTTP_200_OK,
    summary="List own listings",
    description="List every listing published by the current owner, including unavailable ones",
    responses=get_owner_error_responses()
)
async def my_listings(
    filters: ListingSearchFilters = Depends(listing_filters),
    current_user: User = Depends(require_owner),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingListResponse:
    listings = await listing_service.my_listings(current_user, filters)
    return _to_list_response(listings)


@router.get(
    "/locations/available",
    response_model=LocationListResponse,
    status_code=status.HTTP_200_OK,
    summary="List available locations",
    description="Sorted distinct locations of available listings",
    responses=get_common_error_responses()
)
async def available_locations(
    current_user: User = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> LocationListResponse:
    locations = await listing_service.get_available_locations()
    return LocationListResponse(data=locations)


@router.get(
    "/{listing_id}",
    response_model=ListingDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get listing",
    description="Get a listing with its owner's contact details",
    responses=get_mutation_error_responses()
)
async def get_listing(
    listing_id: str = Path(..., description="Listing ID"),
    current_user: User = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingDetailResponse:
    listing = await listing_service.get_listing(listing_id)
    return ListingDetailResponse(data=_to_response(listing))


@router.post(
    "",
    response_model=ListingDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create listing",
    description="Publish a new listing. Requires owner role.",
    responses=get_owner_error_responses()
)
async def create_listing(
    listing_data: ListingCreate,
    current_user: User = Depends(require_owner),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingDetailResponse:
    """
    Create a new listing owned by the current user.

    Raises:
        InsufficientRoleError: If the user is not an owner
        ValidationError: If listing data is invalid
    """
    listing = await listing_service.create_listing(listing_data, current_user)
    return ListingDetailResponse(data=_to_response(listing))


@router.put(
    "/{listing_id}",
    response_model=ListingDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Update listing",
    description="Update a listing. Only the owner who published it may update it.",
    responses=get_mutation_error_responses()
)
async def update_listing(
    listing_data: ListingUpdate,
    listing_id: str = Path(..., description="Listing ID"),
    current_user: User = Depends(require_owner),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingDetailResponse:
    """
    Update an existing listing.

    Raises:
        ListingNotFoundError: If the listing doesn't exist
        ListingOwnershipError: If the user doesn't own the listing
    """
    listing = await listing_service.update_listing(listing_id, listing_data, current_user)
    return ListingDetailResponse(data=_to_response(listing))


@router.delete(
    "/{listing_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete listing",
    description="Delete a listing. Only the owner who published it may delete it.",
    responses=get_mutation_error_responses()
)
async def delete_listing(
    listing_id: str = Path(..., description="Listing ID"),
    current_user: User = Depends(require_owner),
    listing_service: ListingService = Depends(get_listing_service)
) -> MessageResponse:
    await listing_service.delete_listing(listing_id, current_user)
    return MessageResponse(message="Listing deleted successfully")
