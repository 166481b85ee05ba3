"""API routes for Travelin."""

from travelin_api.routes.bookings import router as bookings_router
from travelin_api.routes.favorites import router as favorites_router
from travelin_api.routes.pois import router as pois_router

__all__ = [
    "bookings_router",
    "favorites_router",
    "pois_router",
]
