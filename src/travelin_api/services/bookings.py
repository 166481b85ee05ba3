"""Booking interval engine.

Guarantees that for a given POI no two live bookings overlap. Two date
ranges conflict when ``existing.start <= candidate.end`` and
``existing.end >= candidate.start``: a closed-interval check, so a booking
ending on day N conflicts with one starting on day N.

Writes for the same POI are serialized: the in-process ``poi_locks`` entry
is held across check-and-write, and the POI row is locked for the duration
of the transaction so that several worker processes on PostgreSQL are
serialized as well.
"""

import logging
from collections.abc import Iterable
from datetime import date
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.errors import (
    BookingConflictError,
    DateRangeInvalidError,
    ResourceNotFoundError,
)
from travelin_api.repositories import booking as booking_repo
from travelin_api.repositories import poi as poi_repo
from travelin_api.schemas import (
    Availability,
    BookingInterval,
    BookingRecord,
    ConflictInfo,
    Page,
)
from travelin_api.services.locks import poi_locks

logger = logging.getLogger(__name__)


def intervals_overlap(existing: BookingInterval, candidate: BookingInterval) -> bool:
    return existing.start_date <= candidate.end_date and existing.end_date >= candidate.start_date


def find_conflict(
    bookings: Iterable[BookingRecord], candidate: BookingInterval
) -> BookingRecord | None:
    """First booking that overlaps ``candidate``, in the order given."""
    for booking in bookings:
        if intervals_overlap(booking.interval, candidate):
            return booking
    return None


def availability_of(bookings: Iterable[BookingRecord], candidate: BookingInterval) -> Availability:
    conflict = find_conflict(bookings, candidate)
    if conflict is None:
        return Availability(available=True)
    return Availability(
        available=False,
        conflict=ConflictInfo(
            id=conflict.id, start_date=conflict.start_date, end_date=conflict.end_date
        ),
    )


def _poi_not_found(poi_id: str) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        f"Point of Interest not found: {poi_id}", {"parameter": "poiId"}
    )


def _booking_not_found() -> ResourceNotFoundError:
    return ResourceNotFoundError("Booking not found", {"parameter": "bookingId"})


def _reject_past_start(interval: BookingInterval, today: date) -> None:
    if interval.start_date < today:
        raise DateRangeInvalidError(
            "Start date cannot be in the past", {"parameter": "startDate"}
        )


async def _get_owned_booking(
    db: AsyncSession, booking_id: UUID, user_id: UUID, with_poi: bool = False
) -> BookingRecord:
    """Fetch a booking for its owner. Someone else's booking reads as missing."""
    booking = await booking_repo.get_booking(db, booking_id, with_poi=with_poi)
    if booking is None:
        raise _booking_not_found()
    if booking.user_id != user_id:
        logger.warning(
            "Booking access by non-owner: booking_id=%s owner=%s requester=%s",
            booking_id,
            booking.user_id,
            user_id,
        )
        raise _booking_not_found()
    return booking


async def check_availability(
    db: AsyncSession,
    poi_id: str,
    interval: BookingInterval,
    exclude_booking_id: UUID | None = None,
) -> Availability:
    """Report whether ``interval`` is free for the POI, with the conflict if not."""
    if not await poi_repo.poi_exists(db, poi_id):
        raise _poi_not_found(poi_id)
    bookings = await booking_repo.find_bookings_for_poi(db, poi_id, exclude_id=exclude_booking_id)
    return availability_of(bookings, interval)


async def create_booking(
    db: AsyncSession,
    user_id: UUID,
    poi_id: str,
    interval: BookingInterval,
    today: date | None = None,
) -> BookingRecord:
    """Reserve a POI for ``interval``. Raises ``BookingConflictError`` on overlap."""
    today = today or date.today()

    async with poi_locks.hold(poi_id):
        if not await booking_repo.lock_poi_row(db, poi_id):
            await db.rollback()
            raise _poi_not_found(poi_id)

        try:
            _reject_past_start(interval, today)
        except DateRangeInvalidError:
            await db.rollback()
            raise

        existing = await booking_repo.find_bookings_for_poi(db, poi_id)
        conflict = find_conflict(existing, interval)
        if conflict is not None:
            await db.rollback()
            logger.info(
                "Booking conflict: poi_id=%s requester=%s requested=%s existing=%s (%s)",
                poi_id,
                user_id,
                interval,
                conflict.id,
                conflict.interval,
            )
            raise BookingConflictError(conflict.id, conflict.start_date, conflict.end_date)

        try:
            booking = await booking_repo.insert_booking(db, user_id, poi_id, interval)
        except IntegrityError as exc:
            await db.rollback()
            logger.warning(
                "Booking insert rejected by storage: poi_id=%s user_id=%s error=%s",
                poi_id,
                user_id,
                exc.orig,
            )
            raise BookingConflictError() from exc

    logger.info(
        "Booking created: booking_id=%s poi_id=%s user_id=%s dates=%s",
        booking.id,
        poi_id,
        user_id,
        interval,
    )
    return booking


async def reschedule_booking(
    db: AsyncSession,
    booking_id: UUID,
    user_id: UUID,
    interval: BookingInterval,
    today: date | None = None,
) -> BookingRecord:
    """Move an owned booking to new dates, ignoring its own current dates."""
    today = today or date.today()
    booking = await _get_owned_booking(db, booking_id, user_id)
    _reject_past_start(interval, today)

    async with poi_locks.hold(booking.poi_id):
        await booking_repo.lock_poi_row(db, booking.poi_id)
        existing = await booking_repo.find_bookings_for_poi(
            db, booking.poi_id, exclude_id=booking_id
        )
        conflict = find_conflict(existing, interval)
        if conflict is not None:
            await db.rollback()
            logger.info(
                "Reschedule conflict: booking_id=%s requested=%s existing=%s (%s)",
                booking_id,
                interval,
                conflict.id,
                conflict.interval,
            )
            raise BookingConflictError(conflict.id, conflict.start_date, conflict.end_date)

        try:
            updated = await booking_repo.update_booking_interval(db, booking_id, interval)
        except IntegrityError as exc:
            await db.rollback()
            logger.warning(
                "Booking update rejected by storage: booking_id=%s error=%s",
                booking_id,
                exc.orig,
            )
            raise BookingConflictError() from exc

    if updated is None:
        raise _booking_not_found()
    logger.info("Booking rescheduled: booking_id=%s dates=%s", booking_id, interval)
    return updated


async def cancel_booking(db: AsyncSession, booking_id: UUID, user_id: UUID) -> None:
    """Delete an owned booking. Missing and foreign bookings are both not found."""
    await _get_owned_booking(db, booking_id, user_id)
    if not await booking_repo.delete_booking(db, booking_id):
        raise _booking_not_found()
    logger.info("Booking cancelled: booking_id=%s user_id=%s", booking_id, user_id)


async def get_booking_for_user(db: AsyncSession, booking_id: UUID, user_id: UUID) -> BookingRecord:
    return await _get_owned_booking(db, booking_id, user_id, with_poi=True)


async def list_user_bookings(
    db: AsyncSession, user_id: UUID, limit: int = 10, offset: int = 0
) -> Page[BookingRecord]:
    return await booking_repo.list_bookings_for_user(db, user_id, limit, offset)


async def list_poi_bookings(
    db: AsyncSession, poi_id: str, limit: int = 10, offset: int = 0
) -> Page[BookingRecord]:
    if not await poi_repo.poi_exists(db, poi_id):
        raise _poi_not_found(poi_id)
    return await booking_repo.list_bookings_for_poi(db, poi_id, limit, offset)
