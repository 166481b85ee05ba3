"""Pydantic schemas for the Travelin API."""

from travelin_api.schemas.booking import (
    Availability,
    AvailabilityData,
    AvailabilityResponse,
    BookedSlot,
    BookedSlotCollection,
    BookingCollection,
    BookingCreate,
    BookingInterval,
    BookingOut,
    BookingRecord,
    BookingReschedule,
    BookingResponse,
    ConflictInfo,
)
from travelin_api.schemas.common import (
    ApiModel,
    CollectionMeta,
    MessageData,
    MessageResponse,
    Page,
    PaginationLinks,
    SelfLink,
)
from travelin_api.schemas.favorite import (
    FavoriteAdded,
    FavoriteAddedResponse,
    FavoriteCheck,
    FavoriteCheckResponse,
    FavoriteCreate,
    FavoriteRecord,
)
from travelin_api.schemas.poi import (
    POI,
    CategoryList,
    GeoCode,
    Location,
    LocationCollection,
    LocationResponse,
    POICategory,
    POICreate,
    POISubType,
    PoiStatistics,
    PoiStatisticsResponse,
    SearchResult,
)
from travelin_api.schemas.user import (
    AuthData,
    AuthResponse,
    SessionResponse,
    UserCreate,
    UserEnvelope,
    UserEnvelopeResponse,
    UserLogin,
    UserRecord,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "ApiModel",
    "AuthData",
    "AuthResponse",
    "Availability",
    "AvailabilityData",
    "AvailabilityResponse",
    "BookedSlot",
    "BookedSlotCollection",
    "BookingCollection",
    "BookingCreate",
    "BookingInterval",
    "BookingOut",
    "BookingRecord",
    "BookingReschedule",
    "BookingResponse",
    "CategoryList",
    "CollectionMeta",
    "ConflictInfo",
    "FavoriteAdded",
    "FavoriteAddedResponse",
    "FavoriteCheck",
    "FavoriteCheckResponse",
    "FavoriteCreate",
    "FavoriteRecord",
    "GeoCode",
    "Location",
    "LocationCollection",
    "LocationResponse",
    "MessageData",
    "MessageResponse",
    "POI",
    "POICategory",
    "POICreate",
    "POISubType",
    "Page",
    "PaginationLinks",
    "PoiStatistics",
    "PoiStatisticsResponse",
    "SearchResult",
    "SelfLink",
    "SessionResponse",
    "UserCreate",
    "UserEnvelope",
    "UserEnvelopeResponse",
    "UserLogin",
    "UserRecord",
    "UserResponse",
    "UserUpdate",
]
