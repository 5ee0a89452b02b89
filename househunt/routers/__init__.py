"""
API route handlers for the House Hunt API.
"""

from .auth import router as auth_router
from .listings import router as listings_router

__all__ = ["auth_router", "listings_router"]
