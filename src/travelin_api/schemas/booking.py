"""Booking schemas - interval value object, read model and wire shapes."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from travelin_api.errors import DateRangeInvalidError
from travelin_api.schemas.common import ApiModel, CollectionMeta, SelfLink
from travelin_api.schemas.poi import POI, Location


def _iso_date(value: Any) -> Any:
    """Accept only ``YYYY-MM-DD`` strings (or dates), never timestamps."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValueError("Invalid date format. Use YYYY-MM-DD")


IsoDate = Annotated[date, BeforeValidator(_iso_date)]


@dataclass(frozen=True)
class BookingInterval:
    """A calendar-date range. ``end_date`` must be strictly after ``start_date``."""

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date <= self.start_date:
            raise DateRangeInvalidError(
                "End date must be after start date", {"parameter": "endDate"}
            )

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"


class BookingRecord(BaseModel):
    """Immutable view of a stored booking, optionally joined with its POI."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    user_id: UUID
    poi_id: str
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime
    poi: POI | None = None

    @property
    def interval(self) -> BookingInterval:
        return BookingInterval(self.start_date, self.end_date)


class ConflictInfo(ApiModel):
    """The existing booking a candidate interval collides with."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    start_date: date
    end_date: date


class Availability(ApiModel):
    model_config = ConfigDict(frozen=True)

    available: bool
    conflict: ConflictInfo | None = None


# Requests


class BookingCreate(ApiModel):
    poi_id: str = Field(..., min_length=1, max_length=64)
    start_date: IsoDate
    end_date: IsoDate


class BookingReschedule(ApiModel):
    start_date: IsoDate
    end_date: IsoDate


# Responses


class BookingOut(ApiModel):
    id: UUID
    self_link: SelfLink = Field(..., alias="self")
    user_id: UUID
    poi_id: str
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime
    poi: Location | None = None


class BookingResponse(ApiModel):
    data: BookingOut


class BookingCollection(ApiModel):
    data: list[BookingOut]
    meta: CollectionMeta


class BookedSlot(ApiModel):
    """A booked interval with no owner information."""

    id: UUID
    start_date: date
    end_date: date


class BookedSlotCollection(ApiModel):
    data: list[BookedSlot]
    meta: CollectionMeta


class AvailabilityData(ApiModel):
    poi_id: str
    start_date: date
    end_date: date
    available: bool
    conflict: ConflictInfo | None = None


class AvailabilityResponse(ApiModel):
    data: AvailabilityData
