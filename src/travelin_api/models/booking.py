"""Booking model."""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from travelin_api.database import Base

if TYPE_CHECKING:
    from travelin_api.models.poi import PointOfInterest
    from travelin_api.models.user import User


class Booking(Base):
    """A reservation of a POI for a calendar-date range.

    Overlap between bookings of the same POI is prevented by the booking
    service, not by a database constraint.
    """

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    poi_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("points_of_interest.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="bookings")
    poi: Mapped["PointOfInterest"] = relationship("PointOfInterest", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_booking_dates_ordered"),
        Index("idx_bookings_user", "user_id"),
        Index("idx_bookings_poi", "poi_id"),
        Index("idx_bookings_poi_dates", "poi_id", "start_date", "end_date"),
    )
