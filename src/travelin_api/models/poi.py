"""Point of Interest model."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from travelin_api.database import Base, JSONColumn

if TYPE_CHECKING:
    from travelin_api.models.booking import Booking
    from travelin_api.models.favorite import UserFavorite


class POICategory(str, Enum):
    """Categories a POI can be filed under."""

    SIGHTS = "SIGHTS"
    BEACH_PARK = "BEACH_PARK"
    HISTORICAL = "HISTORICAL"
    NIGHTLIFE = "NIGHTLIFE"
    RESTAURANT = "RESTAURANT"
    SHOPPING = "SHOPPING"


class POISubType(str, Enum):
    """Location sub-types."""

    AIRPORT = "AIRPORT"
    CITY = "CITY"
    POINT_OF_INTEREST = "POINT_OF_INTEREST"
    DISTRICT = "DISTRICT"


class PointOfInterest(Base):
    """A bookable point of interest."""

    __tablename__ = "points_of_interest"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="location")
    sub_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=POISubType.POINT_OF_INTEREST.value
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    # Lower rank = higher priority
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    tags: Mapped[list] = mapped_column(JSONColumn, nullable=False, default=list)
    pictures: Mapped[list] = mapped_column(JSONColumn, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="poi", cascade="all, delete-orphan", passive_deletes=True
    )
    favorites: Mapped[list["UserFavorite"]] = relationship(
        "UserFavorite", back_populates="poi", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("rank >= 1", name="ck_poi_rank_positive"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_poi_latitude_range"),
        CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="ck_poi_longitude_range"
        ),
        Index("idx_poi_coordinates", "latitude", "longitude"),
        Index("idx_poi_category", "category"),
        Index("idx_poi_rank", "rank"),
        Index("idx_poi_category_rank", "category", "rank"),
    )
