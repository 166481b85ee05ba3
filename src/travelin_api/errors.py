"""API error types.

Every error carries the HTTP status plus the Amadeus-style numeric code and
title that clients match on. Handlers in ``travelin_api.main`` render them as
``{"errors": [...]}``.
"""

from datetime import date
from typing import Any


class ApiError(Exception):
    """Base API error with status, code, title and user-safe detail."""

    status: int = 500
    code: int = 141
    title: str = "SYSTEM ERROR HAS OCCURRED"

    def __init__(self, detail: str, source: dict[str, Any] | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.source = source

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {
            "status": self.status,
            "code": self.code,
            "title": self.title,
            "detail": self.detail,
        }
        if self.source:
            error["source"] = self.source
        return error

    def __str__(self) -> str:
        return f"{self.title}: {self.detail}"


class ValidationError(ApiError):
    status = 400
    code = 477
    title = "INVALID FORMAT"


class MandatoryDataMissingError(ApiError):
    status = 400
    code = 32171
    title = "MANDATORY DATA MISSING"


class InvalidOptionError(ApiError):
    status = 400
    code = 572
    title = "INVALID OPTION"


class InvalidDataError(ApiError):
    status = 400
    code = 4926
    title = "INVALID DATA RECEIVED"


class UnauthorizedError(ApiError):
    status = 401
    code = 38187
    title = "UNAUTHORIZED"


class NotFoundError(ApiError):
    status = 404
    code = 1797
    title = "NOT FOUND"


class ConflictError(ApiError):
    status = 409
    code = 4926
    title = "CONFLICT"


class InternalServerError(ApiError):
    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        source: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, source)


# Search and booking errors


class InvalidRegionError(InvalidOptionError):
    """Malformed bounding box or radius out of range."""


class ResourceNotFoundError(NotFoundError):
    """A POI, booking or favorite does not exist (or is not visible to the caller)."""


class DateRangeInvalidError(ValidationError):
    """End date not after start date, or a booking starting in the past."""


class DuplicateFavoriteError(ValidationError):
    """The POI is already in the user's favorites."""

    def __init__(self, poi_id: str) -> None:
        super().__init__("POI is already in favorites", {"parameter": "poiId"})
        self.poi_id = poi_id


class BookingConflictError(ConflictError):
    """The requested dates overlap an existing booking for the same POI."""

    title = "BOOKING CONFLICT"

    def __init__(
        self,
        booking_id: Any = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> None:
        if start_date is not None and end_date is not None:
            reason = (
                "Conflicts with existing booking "
                f"({start_date.isoformat()} to {end_date.isoformat()})"
            )
        else:
            reason = "Date range overlaps with existing booking"
        super().__init__(
            f"POI is not available for the selected dates. {reason}",
            {"parameter": "startDate, endDate"},
        )
        self.booking_id = booking_id
        self.start_date = start_date
        self.end_date = end_date
