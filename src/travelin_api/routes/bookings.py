"""Booking endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.config import settings
from travelin_api.database import get_db
from travelin_api.dependencies import get_current_user, get_optional_user
from travelin_api.errors import UnauthorizedError
from travelin_api.formatting import BOOKINGS_PATH, build_pagination_meta, format_booking
from travelin_api.schemas import (
    AvailabilityData,
    AvailabilityResponse,
    BookingCollection,
    BookingCreate,
    BookingInterval,
    BookingReschedule,
    BookingResponse,
    MessageData,
    MessageResponse,
)
from travelin_api.services import bookings as booking_service
from travelin_api.validation import (
    Pagination,
    pagination_params,
    query_params_dict,
    require,
    validate_date,
)

router = APIRouter(prefix=BOOKINGS_PATH, tags=["bookings"])


@router.get("/availability", response_model=AvailabilityResponse, response_model_exclude_none=True)
async def check_availability(
    poi_id: str | None = Query(default=None, alias="poiId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    exclude_booking_id: UUID | None = Query(default=None, alias="excludeBookingId"),
    db: AsyncSession = Depends(get_db),
    user_id: UUID | None = Depends(get_optional_user),
) -> AvailabilityResponse:
    """
    Check whether a POI is free for the given dates.

    Authentication is optional. A signed-in caller may pass
    ``excludeBookingId`` to preview moving one of their own bookings.
    """
    poi = require(poi_id, "poiId")
    interval = BookingInterval(
        validate_date(start_date, "startDate"), validate_date(end_date, "endDate")
    )

    if exclude_booking_id is not None:
        if user_id is None:
            raise UnauthorizedError(
                "Authentication is required to exclude a booking",
                {"parameter": "excludeBookingId"},
            )
        await booking_service.get_booking_for_user(db, exclude_booking_id, user_id)

    availability = await booking_service.check_availability(
        db, poi, interval, exclude_booking_id=exclude_booking_id
    )
    return AvailabilityResponse(
        data=AvailabilityData(
            poi_id=poi,
            start_date=interval.start_date,
            end_date=interval.end_date,
            available=availability.available,
            conflict=availability.conflict,
        )
    )


@router.get("", response_model=BookingCollection, response_model_exclude_none=True)
async def list_bookings(
    page: Pagination = Depends(pagination_params),
    query: dict[str, list[str]] = Depends(query_params_dict),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> BookingCollection:
    """The caller's bookings with their POIs, earliest start first."""
    result = await booking_service.list_user_bookings(db, user_id, page.limit, page.offset)
    return BookingCollection(
        data=[format_booking(b, settings.base_url) for b in result.items],
        meta=build_pagination_meta(
            settings.base_url, BOOKINGS_PATH, query, result.total_count, page.limit, page.offset
        ),
    )


@router.post(
    "",
    response_model=BookingResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> BookingResponse:
    """
    Book a POI for a date range.

    Returns 409 if the range overlaps an existing booking for the POI.
    Ranges are closed: a booking ending on the 15th blocks one starting
    on the 15th.
    """
    interval = BookingInterval(booking_data.start_date, booking_data.end_date)
    booking = await booking_service.create_booking(db, user_id, booking_data.poi_id, interval)
    return BookingResponse(data=format_booking(booking, settings.base_url))


@router.get("/{booking_id}", response_model=BookingResponse, response_model_exclude_none=True)
async def get_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> BookingResponse:
    """Get one of the caller's bookings. Other users' bookings are reported as not found."""
    booking = await booking_service.get_booking_for_user(db, booking_id, user_id)
    return BookingResponse(data=format_booking(booking, settings.base_url))


@router.patch("/{booking_id}", response_model=BookingResponse, response_model_exclude_none=True)
async def reschedule_booking(
    booking_id: UUID,
    reschedule: BookingReschedule,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> BookingResponse:
    """Move one of the caller's bookings to new dates."""
    interval = BookingInterval(reschedule.start_date, reschedule.end_date)
    booking = await booking_service.reschedule_booking(db, booking_id, user_id, interval)
    return BookingResponse(data=format_booking(booking, settings.base_url))


@router.delete("/{booking_id}", response_model=MessageResponse)
async def cancel_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> MessageResponse:
    """Cancel one of the caller's bookings."""
    await booking_service.cancel_booking(db, booking_id, user_id)
    return MessageResponse(data=MessageData(message="Booking cancelled successfully"))
