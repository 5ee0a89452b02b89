"""
Listing service for browsing and managing rental listings.
Applies role and ownership rules on top of the listing repository.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from househunt.config import get_settings
from househunt.repositories.listing import (
    ListingRepository,
    ListingSearchFilters,
    build_listing_query
)
from househunt.models.listing import Listing
from househunt.models.user import User, UserRole
from househunt.schemas.listing import ListingCreate, ListingUpdate
from househunt.utils.auth import ensure_role
from househunt.utils.exceptions import (
    ListingNotFoundError,
    ListingOwnershipError,
    ValidationError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class ListingService:
    """
    Listing service: browse queries for every authenticated user and
    owner-only writes restricted to the listing's owner.
    """

    def __init__(self, db_session: AsyncSession, default_image_url: Optional[str] = None):
        self.db = db_session
        self.listing_repo = ListingRepository(db_session)
        self.default_image_url = default_image_url or get_settings().default_image_url

    async def list_listings(
        self,
        current_user: User,
        filters: Optional[ListingSearchFilters] = None
    ) -> List[Listing]:
        """
        Browse available listings, newest first.

        Args:
            current_user: Authenticated requester
            filters: Optional location/price/bedroom filters

        Returns:
            Matching available listings
        """
        query = build_listing_query(filters, requester=current_user)
        listings = await self.listing_repo.search(query)
        logger.debug(f"User {current_user.id} browsed listings with {filters}: {len(listings)} results")
        return listings

    async def my_listings(
        self,
        current_user: User,
        filters: Optional[ListingSearchFilters] = None
    ) -> List[Listing]:
        """
        List every listing the requesting owner has published, available or not.

        Raises:
            InsufficientRoleError: If the requester is not an owner
        """
        query = build_listing_query(filters, requester=current_user, own_listings=True)
        return await self.listing_repo.search(query)

    async def get_listing(self, listing_id: str) -> Listing:
        """
        Get a single listing with its owner's contact summary.

        Raises:
            ListingNotFoundError: If the id is malformed or unknown
        """
        listing = await self._get_existing_listing(listing_id)
        logger.debug(f"Retrieved listing: {listing.id}")
        return listing

    async def create_listing(self, listing_data: ListingCreate, current_user: User) -> Listing:
        """
        Publish a new listing owned by the requester.

        Raises:
            InsufficientRoleError: If the requester is not an owner
            ValidationError: If the listing violates model invariants
        """
        ensure_role(current_user, UserRole.OWNER)

        create_data = listing_data.model_dump()
        if not create_data.get("image_url"):
            create_data["image_url"] = self.default_image_url
        create_data["owner_id"] = current_user.id
        create_data["available"] = True

        try:
            listing = await self.listing_repo.create_listing(create_data)
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Listing created by {current_user.email}: {listing.title} (ID: {listing.id})")
        return listing

    async def update_listing(
        self,
        listing_id: str,
        listing_data: ListingUpdate,
        current_user: User
    ) -> Listing:
        """
        Update a listing owned by the requester. Concurrent updates are last-write-wins.

        Raises:
            InsufficientRoleError: If the requester is not an owner
            ListingNotFoundError: If the listing doesn't exist
            ListingOwnershipError: If the requester doesn't own the listing
            ValidationError: If the update violates model invariants
        """
        ensure_role(current_user, UserRole.OWNER)
        listing = await self._get_existing_listing(listing_id)
        self._check_ownership(listing, current_user, "update")

        update_data = listing_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return listing

        try:
            updated = await self.listing_repo.update_listing(listing, update_data)
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Listing updated by {current_user.email}: {updated.id} ({', '.join(update_data)})")
        return updated

    async def delete_listing(self, listing_id: str, current_user: User) -> None:
        """
        Delete a listing owned by the requester.

        Raises:
            InsufficientRoleError: If the requester is not an owner
            ListingNotFoundError: If the listing doesn't exist
            ListingOwnershipError: If the requester doesn't own the listing
        """
        ensure_role(current_user, UserRole.OWNER)
        listing = await self._get_existing_listing(listing_id)
        self._check_ownership(listing, current_user, "delete")

        deleted = await self.listing_repo.delete(listing.id)
        if not deleted:
            raise ListingNotFoundError(listing_id)

        logger.info(f"Listing deleted by {current_user.email}: {listing.id}")

    async def get_available_locations(self) -> List[str]:
        return await self.listing_repo.get_available_locations()

    async def _get_existing_listing(self, listing_id: str) -> Listing:
        parsed_id = self._parse_listing_id(listing_id)
        listing = await self.listing_repo.get_with_owner(parsed_id)
        if not listing:
            raise ListingNotFoundError(listing_id)
        return listing

    @staticmethod
    def _parse_listing_id(listing_id: str) -> uuid.UUID:
        # Malformed ids are reported the same way as unknown ones
        try:
            return uuid.UUID(str(listing_id))
        except ValueError:
            raise ListingNotFoundError(listing_id)

    @staticmethod
    def _check_ownership(listing: Listing, current_user: User, action: str) -> None:
        if not current_user.owns(listing.owner_id):
            logger.warning(f"User {current_user.id} attempted to {action} listing {listing.id} owned by {listing.owner_id}")
            raise ListingOwnershipError(action)
