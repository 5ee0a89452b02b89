"""
Database models for the House Hunt API.
"""

from househunt.models.user import User, UserRole
from househunt.models.listing import Listing

__all__ = [
    "User",
    "UserRole",
    "Listing",
]
