"""SQLAlchemy models for the Travelin database."""

from travelin_api.models.booking import Booking
from travelin_api.models.favorite import UserFavorite
from travelin_api.models.poi import POICategory, PointOfInterest, POISubType
from travelin_api.models.user import Session, User

__all__ = [
    "Booking",
    "POICategory",
    "POISubType",
    "PointOfInterest",
    "Session",
    "User",
    "UserFavorite",
]
