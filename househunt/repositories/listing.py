"""
Listing repository and query builder.

`build_listing_query` turns optional browse filters plus the requester into a
SQLAlchemy predicate and sort order; `ListingRepository` executes it and owns
the listing writes.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc, Select
from sqlalchemy.orm import selectinload
from househunt.repositories.base import BaseRepository
from househunt.models.listing import Listing
from househunt.models.user import User, UserRole
from househunt.utils.auth import ensure_role
from typing import Optional, List, Dict, Any
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class ListingSearchFilters:
    """Optional browse filters; every supplied filter narrows the result."""

    def __init__(
        self,
        location: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        bedrooms: Optional[int] = None
    ):
        self.location = location.strip() if location and location.strip() else None
        self.min_price = min_price
        self.max_price = max_price
        self.bedrooms = bedrooms

    def __repr__(self) -> str:
        return (
            f"ListingSearchFilters(location={self.location!r}, min_price={self.min_price}, "
            f"max_price={self.max_price}, bedrooms={self.bedrooms})"
        )


class ListingQuery:
    """A listing predicate (list of AND-ed conditions) with its sort order."""

    def __init__(self, conditions: List, order_by: List):
        self.conditions = conditions
        self.order_by = order_by

    @property
    def predicate(self):
        return and_(*self.conditions)

    def statement(self) -> Select:
        return (
            select(Listing)
            .options(selectinload(Listing.owner))
            .where(self.predicate)
            .order_by(*self.order_by)
        )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_listing_query(
    filters: Optional[ListingSearchFilters] = None,
    requester: Optional[User] = None,
    own_listings: bool = False
) -> ListingQuery:
    """
    Build the predicate and sort order for a listing browse request.

    Args:
        filters: Optional location/price/bedroom filters
        requester: Identity making the request
        own_listings: True when an owner is listing their own properties

    Returns:
        ListingQuery with conditions combined by logical AND, newest first

    Raises:
        InsufficientRoleError: If own listings are requested by a non-owner
    """
    filters = filters or ListingSearchFilters()
    conditions = []

    if own_listings:
        if requester is None:
            raise ValueError("A requester is required to list own listings")
        ensure_role(requester, UserRole.OWNER)
        conditions.append(Listing.owner_id == requester.id)
    else:
        conditions.append(Listing.available.is_(True))

    # Location filter (case-insensitive substring match)
    if filters.location:
        conditions.append(Listing.location.ilike(f"%{_escape_like(filters.location)}%", escape="\\"))

    # Price range filters
    if filters.min_price is not None:
        conditions.append(Listing.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Listing.price <= filters.max_price)

    if filters.bedrooms is not None:
        conditions.append(Listing.bedrooms == filters.bedrooms)

    return ListingQuery(conditions=conditions, order_by=[desc(Listing.created_at)])


class ListingRepository(BaseRepository[Listing]):
    """
    Repository for listings: browse queries, detail lookups and owner writes.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Listing, db)

    async def create_listing(self, listing_data: Dict[str, Any]) -> Listing:
        """
        Create a new listing after model-level validation.

        Raises:
            ValueError: If price or bedrooms violate listing invariants
        """
        Listing(**listing_data).validate_all()

        created = await self.create(listing_data)
        logger.info(f"Created listing: {created.title} (ID: {created.id})")
        return await self.get_with_owner(created.id)

    async def get_with_owner(self, listing_id: uuid.UUID) -> Optional[Listing]:
        """
        Get a listing with its owner loaded, bypassing any stale identity-map state.
        """
        try:
            query = (
                select(Listing)
                .options(selectinload(Listing.owner))
                .where(Listing.id == listing_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            listing = result.scalar_one_or_none()

            if listing:
                logger.debug(f"Retrieved listing with owner: {listing_id}")

            return listing
        except Exception as e:
            logger.error(f"Failed to get listing {listing_id}: {e}")
            raise

    async def search(self, query: ListingQuery) -> List[Listing]:
        """
        Execute a listing query built by build_listing_query.
        """
        try:
            result = await self.db.execute(query.statement())
            listings = list(result.scalars().all())
            logger.debug(f"Listing search returned {len(listings)} results")
            return listings
        except Exception as e:
            logger.error(f"Failed to search listings: {e}")
            raise

    async def update_listing(self, listing: Listing, update_data: Dict[str, Any]) -> Listing:
        """
        Update a listing; the owner reference is never part of the update.

        Raises:
            ValueError: If the result would violate listing invariants
        """
        update_data = {k: v for k, v in update_data.items() if k not in ("id", "owner_id", "owner")}

        candidate = Listing(
            price=update_data.get("price", listing.price),
            bedrooms=update_data.get("bedrooms", listing.bedrooms)
        )
        candidate.validate_all()

        await self.update(listing, update_data)
        return await self.get_with_owner(listing.id)

    async def get_available_locations(self) -> List[str]:
        """
        Distinct locations of available listings, sorted alphabetically.
        """
        query = (
            select(Listing.location)
            .where(Listing.available.is_(True))
            .distinct()
            .order_by(Listing.location)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
