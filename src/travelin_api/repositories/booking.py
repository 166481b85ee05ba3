"""Booking repository - data access for bookings."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from travelin_api.models import Booking as BookingModel
from travelin_api.models import PointOfInterest as POIModel
from travelin_api.repositories.poi import _to_schema as _poi_to_schema
from travelin_api.schemas import BookingInterval, BookingRecord, Page


def _ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC). SQLite returns naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


async def lock_poi_row(db: AsyncSession, poi_id: str) -> bool:
    """Take a row lock on the POI for the rest of the transaction.

    Returns False if the POI does not exist. SQLite has no row locks, so
    there this is a plain existence check.
    """
    result = await db.execute(
        select(POIModel.id).where(POIModel.id == poi_id).with_for_update()
    )
    return result.scalar_one_or_none() is not None


async def find_bookings_for_poi(
    db: AsyncSession, poi_id: str, exclude_id: UUID | None = None
) -> list[BookingRecord]:
    """All live bookings of a POI, earliest start first."""
    query = select(BookingModel).where(BookingModel.poi_id == poi_id)
    if exclude_id is not None:
        query = query.where(BookingModel.id != exclude_id)
    query = query.order_by(BookingModel.start_date, BookingModel.end_date)
    result = await db.execute(query)
    return [_to_schema(b) for b in result.scalars().all()]


async def insert_booking(
    db: AsyncSession, user_id: UUID, poi_id: str, interval: BookingInterval
) -> BookingRecord:
    """Persist a booking and return it joined with its POI."""
    booking = BookingModel(
        user_id=user_id,
        poi_id=poi_id,
        start_date=interval.start_date,
        end_date=interval.end_date,
    )
    db.add(booking)
    await db.commit()
    return await get_booking(db, booking.id, with_poi=True)


async def get_booking(
    db: AsyncSession, booking_id: UUID, with_poi: bool = False
) -> BookingRecord | None:
    """Get a booking by ID."""
    query = select(BookingModel).where(BookingModel.id == booking_id)
    if with_poi:
        query = query.options(selectinload(BookingModel.poi))
    result = await db.execute(query.execution_options(populate_existing=True))
    booking = result.scalar_one_or_none()
    if booking is None:
        return None
    return _to_schema(booking, with_poi=with_poi)


async def update_booking_interval(
    db: AsyncSession, booking_id: UUID, interval: BookingInterval
) -> BookingRecord | None:
    """Move a booking to new dates."""
    result = await db.execute(select(BookingModel).where(BookingModel.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        return None

    booking.start_date = interval.start_date
    booking.end_date = interval.end_date
    booking.updated_at = datetime.now(UTC)
    await db.commit()
    return await get_booking(db, booking_id, with_poi=True)


async def delete_booking(db: AsyncSession, booking_id: UUID) -> bool:
    """Delete a booking. Returns False if it did not exist."""
    result = await db.execute(delete(BookingModel).where(BookingModel.id == booking_id))
    await db.commit()
    return result.rowcount > 0


async def list_bookings_for_user(
    db: AsyncSession, user_id: UUID, limit: int, offset: int
) -> Page[BookingRecord]:
    """A user's bookings with their POIs, soonest first."""
    total = await db.scalar(
        select(func.count(BookingModel.id)).where(BookingModel.user_id == user_id)
    )
    result = await db.execute(
        select(BookingModel)
        .where(BookingModel.user_id == user_id)
        .options(selectinload(BookingModel.poi))
        .order_by(BookingModel.start_date.asc(), BookingModel.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    items = [_to_schema(b, with_poi=True) for b in result.scalars().all()]
    return Page[BookingRecord](items=items, total_count=total or 0)


async def list_bookings_for_poi(
    db: AsyncSession, poi_id: str, limit: int, offset: int
) -> Page[BookingRecord]:
    total = await db.scalar(
        select(func.count(BookingModel.id)).where(BookingModel.poi_id == poi_id)
    )
    result = await db.execute(
        select(BookingModel)
        .where(BookingModel.poi_id == poi_id)
        .order_by(BookingModel.start_date.asc())
        .limit(limit)
        .offset(offset)
    )
    items = [_to_schema(b) for b in result.scalars().all()]
    return Page[BookingRecord](items=items, total_count=total or 0)


def _to_schema(booking: BookingModel, with_poi: bool = False) -> BookingRecord:
    """Convert SQLAlchemy model to Pydantic schema."""
    return BookingRecord(
        id=booking.id,
        user_id=booking.user_id,
        poi_id=booking.poi_id,
        start_date=booking.start_date,
        end_date=booking.end_date,
        created_at=_ensure_utc(booking.created_at),
        updated_at=_ensure_utc(booking.updated_at),
        poi=_poi_to_schema(booking.poi) if with_poi and booking.poi is not None else None,
    )
