"""Reusable request validators.

One validator per kind of field (coordinate, radius, date, pagination,
categories). Route dependencies compose them so every endpoint reports the
same error for the same mistake.
"""

import math
from dataclasses import dataclass
from datetime import date

from fastapi import Query, Request

from travelin_api.config import settings
from travelin_api.errors import (
    InvalidOptionError,
    InvalidRegionError,
    MandatoryDataMissingError,
    ValidationError,
)
from travelin_api.geo import BoundingBox, GeoPoint
from travelin_api.models.poi import POICategory

VALID_CATEGORIES = [c.value for c in POICategory]


def _is_blank(raw: str | None) -> bool:
    return raw is None or raw.strip() == ""


def require(raw: str | None, name: str) -> str:
    if _is_blank(raw):
        raise MandatoryDataMissingError(f"{name} is required", {"parameter": name})
    return raw.strip()


def parse_float(raw: str, name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            f"{name} must be a valid number", {"parameter": name, "example": raw}
        ) from None
    if math.isnan(value) or math.isinf(value):
        raise ValidationError(f"{name} must be a valid number", {"parameter": name, "example": raw})
    return value


def parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            f"{name} must be a valid integer", {"parameter": name, "example": raw}
        ) from None


def validate_latitude(raw: str | None, name: str = "latitude") -> float:
    value = parse_float(require(raw, name), name)
    if not -90 <= value <= 90:
        raise ValidationError(f"{name} must be between -90 and 90", {"parameter": name, "example": value})
    return value


def validate_longitude(raw: str | None, name: str = "longitude") -> float:
    value = parse_float(require(raw, name), name)
    if not -180 <= value <= 180:
        raise ValidationError(
            f"{name} must be between -180 and 180", {"parameter": name, "example": value}
        )
    return value


def validate_radius(raw: str | None) -> float:
    if _is_blank(raw):
        return settings.default_radius_km
    value = parse_float(raw.strip(), "radius")
    if not 0 <= value <= settings.max_radius_km:
        raise InvalidRegionError(
            f"radius must be between 0 and {settings.max_radius_km:g} kilometers",
            {"parameter": "radius", "example": value},
        )
    return value


def validate_bounding_box(
    north: str | None, south: str | None, east: str | None, west: str | None
) -> BoundingBox:
    north_value = validate_latitude(north, "north")
    south_value = validate_latitude(south, "south")
    if north_value <= south_value:
        raise InvalidRegionError(
            "north must be greater than south",
            {"parameter": "north, south", "example": f"north: {north_value}, south: {south_value}"},
        )
    # east == west is accepted and means a full longitude wrap
    return BoundingBox(
        north=north_value,
        south=south_value,
        east=validate_longitude(east, "east"),
        west=validate_longitude(west, "west"),
    )


def validate_date(raw: str | None, name: str) -> date:
    value = require(raw, name)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            "Invalid date format. Use YYYY-MM-DD", {"parameter": name, "example": value}
        ) from None


def validate_categories(raw_values: list[str] | None) -> list[POICategory] | None:
    """Accept repeated and/or comma-separated values. Unknown values are rejected."""
    if not raw_values:
        return None
    names = [part.strip() for raw in raw_values for part in raw.split(",") if part.strip()]
    if not names:
        return None
    categories: list[POICategory] = []
    for name in names:
        if name not in VALID_CATEGORIES:
            raise InvalidOptionError(
                f"Invalid category: {name}. Valid categories are: {', '.join(VALID_CATEGORIES)}",
                {"parameter": "categories", "example": name},
            )
        category = POICategory(name)
        if category not in categories:
            categories.append(category)
    return categories


def validate_name_query(raw: str | None) -> str:
    return require(raw, "name")


@dataclass(frozen=True)
class Pagination:
    limit: int
    offset: int


def validate_pagination(raw_limit: str | None, raw_offset: str | None) -> Pagination:
    limit = settings.default_page_limit
    offset = 0
    if not _is_blank(raw_limit):
        limit = parse_int(raw_limit.strip(), "page[limit]")
        if limit < 1:
            raise ValidationError(
                "page[limit] must be a positive integer",
                {"parameter": "page[limit]", "example": raw_limit},
            )
        if limit > settings.max_page_limit:
            raise InvalidOptionError(
                f"page[limit] must not exceed {settings.max_page_limit}",
                {"parameter": "page[limit]", "example": limit},
            )
    if not _is_blank(raw_offset):
        offset = parse_int(raw_offset.strip(), "page[offset]")
        if offset < 0:
            raise ValidationError(
                "page[offset] must be a non-negative integer",
                {"parameter": "page[offset]", "example": raw_offset},
            )
    return Pagination(limit=limit, offset=offset)


# FastAPI dependencies


def pagination_params(
    limit: str | None = Query(default=None, alias="page[limit]"),
    offset: str | None = Query(default=None, alias="page[offset]"),
) -> Pagination:
    return validate_pagination(limit, offset)


def category_params(
    categories: list[str] | None = Query(default=None),
) -> list[POICategory] | None:
    return validate_categories(categories)


def center_params(
    latitude: str | None = Query(default=None),
    longitude: str | None = Query(default=None),
) -> GeoPoint:
    return GeoPoint(latitude=validate_latitude(latitude), longitude=validate_longitude(longitude))


def radius_params(radius: str | None = Query(default=None)) -> float:
    return validate_radius(radius)


def bounding_box_params(
    north: str | None = Query(default=None),
    south: str | None = Query(default=None),
    east: str | None = Query(default=None),
    west: str | None = Query(default=None),
) -> BoundingBox:
    return validate_bounding_box(north, south, east, west)


def query_params_dict(request: Request) -> dict[str, list[str]]:
    """Query string as key -> all values, for rebuilding pagination links."""
    params = request.query_params
    return {key: params.getlist(key) for key in params.keys()}
