"""Domain services: geo search, booking intervals and favorites."""

from travelin_api.services import bookings, favorites, poi_search
from travelin_api.services.locks import PoiLockRegistry, poi_locks

__all__ = [
    "PoiLockRegistry",
    "bookings",
    "favorites",
    "poi_locks",
    "poi_search",
]
