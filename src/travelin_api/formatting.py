"""Response formatting.

Stateless functions that turn read models into the wire shapes clients see:
location resources with self links, collection envelopes with pagination
links, and error envelopes.
"""

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

from travelin_api.config import settings
from travelin_api.schemas import (
    BookedSlot,
    BookingOut,
    BookingRecord,
    CollectionMeta,
    GeoCode,
    Location,
    PaginationLinks,
    POI,
    SelfLink,
)

PAGE_OFFSET_PARAM = "page[offset]"
PAGE_LIMIT_PARAM = "page[limit]"

POIS_PATH = f"{settings.api_prefix}/reference-data/locations/pois"
BOOKINGS_PATH = f"{settings.api_prefix}/bookings"
FAVORITES_PATH = f"{settings.api_prefix}/favorites"


def format_location(poi: POI, base_url: str) -> Location:
    return Location(
        id=poi.id,
        self_link=SelfLink(href=f"{base_url}{POIS_PATH}/{poi.id}", methods=["GET"]),
        type=poi.type,
        sub_type=poi.sub_type,
        name=poi.name,
        geo_code=GeoCode(latitude=poi.latitude, longitude=poi.longitude),
        category=poi.category,
        rank=poi.rank,
        tags=list(poi.tags),
        pictures=list(poi.pictures),
    )


def format_locations(pois: Sequence[POI], base_url: str) -> list[Location]:
    return [format_location(poi, base_url) for poi in pois]


def format_booking(booking: BookingRecord, base_url: str) -> BookingOut:
    return BookingOut(
        id=booking.id,
        self_link=SelfLink(
            href=f"{base_url}{BOOKINGS_PATH}/{booking.id}", methods=["GET", "DELETE"]
        ),
        user_id=booking.user_id,
        poi_id=booking.poi_id,
        start_date=booking.start_date,
        end_date=booking.end_date,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        poi=format_location(booking.poi, base_url) if booking.poi is not None else None,
    )


def format_booked_slot(booking: BookingRecord) -> BookedSlot:
    return BookedSlot(id=booking.id, start_date=booking.start_date, end_date=booking.end_date)


def _non_page_params(query_params: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """Flatten query params, dropping pagination keys and keeping repeated values."""
    pairs: list[tuple[str, Any]] = []
    for key, value in query_params.items():
        if key in (PAGE_OFFSET_PARAM, PAGE_LIMIT_PARAM):
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, v) for v in value)
        elif value is not None:
            pairs.append((key, value))
    return pairs


def _build_url(base_url: str, path: str, pairs: list[tuple[str, Any]]) -> str:
    query = urlencode(pairs)
    return f"{base_url}{path}{'?' + query if query else ''}"


def build_pagination_meta(
    base_url: str,
    path: str,
    query_params: Mapping[str, Any],
    total_count: int,
    limit: int,
    offset: int,
) -> CollectionMeta:
    """Count plus self/first/last/previous/next/up links.

    ``page[offset]`` is only emitted when positive and ``page[limit]`` only
    when it differs from the default page size.
    """
    base_pairs = _non_page_params(query_params)

    def page_url(page_offset: int) -> str:
        pairs = list(base_pairs)
        if page_offset > 0:
            pairs.append((PAGE_OFFSET_PARAM, page_offset))
        if limit != settings.default_page_limit:
            pairs.append((PAGE_LIMIT_PARAM, limit))
        return _build_url(base_url, path, pairs)

    last_offset = max(0, ((total_count - 1) // limit) * limit)

    return CollectionMeta(
        count=total_count,
        links=PaginationLinks(
            self_link=page_url(offset),
            first=page_url(0),
            last=page_url(last_offset),
            previous=page_url(max(0, offset - limit)) if offset > 0 else None,
            next=page_url(offset + limit) if offset + limit < total_count else None,
            up=_build_url(base_url, path, base_pairs),
        ),
    )


def format_error(
    status: int,
    code: int,
    title: str,
    detail: str,
    source: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"status": status, "code": code, "title": title, "detail": detail}
    if source:
        error["source"] = dict(source)
    return {"errors": [error]}
