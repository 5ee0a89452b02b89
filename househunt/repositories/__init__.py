"""
Repository layer for data access operations.
"""

from househunt.repositories.base import BaseRepository
from househunt.repositories.listing import (
    ListingRepository,
    ListingSearchFilters,
    ListingQuery,
    build_listing_query
)
from househunt.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ListingRepository",
    "ListingSearchFilters",
    "ListingQuery",
    "build_listing_query",
    "UserRepository"
]
