"""Points of Interest search endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.config import settings
from travelin_api.database import get_db
from travelin_api.dependencies import get_current_user
from travelin_api.formatting import (
    POIS_PATH,
    build_pagination_meta,
    format_booked_slot,
    format_location,
    format_locations,
)
from travelin_api.geo import BoundingBox, GeoPoint
from travelin_api.models.poi import POICategory
from travelin_api.schemas import (
    BookedSlotCollection,
    CategoryList,
    LocationCollection,
    LocationResponse,
    PoiStatisticsResponse,
    SearchResult,
)
from travelin_api.services import bookings as booking_service
from travelin_api.services import poi_search
from travelin_api.validation import (
    Pagination,
    bounding_box_params,
    category_params,
    center_params,
    pagination_params,
    query_params_dict,
    radius_params,
    validate_name_query,
)

router = APIRouter(prefix=POIS_PATH, tags=["pois"])


def _collection(
    result: SearchResult, query: dict[str, list[str]], page: Pagination, path: str = POIS_PATH
) -> LocationCollection:
    return LocationCollection(
        data=format_locations(result.items, settings.base_url),
        meta=build_pagination_meta(
            settings.base_url, path, query, result.total_count, page.limit, page.offset
        ),
    )


@router.get("", response_model=LocationCollection, response_model_exclude_none=True)
async def search_by_radius(
    center: GeoPoint = Depends(center_params),
    radius_km: float = Depends(radius_params),
    categories: list[POICategory] | None = Depends(category_params),
    page: Pagination = Depends(pagination_params),
    query: dict[str, list[str]] = Depends(query_params_dict),
    db: AsyncSession = Depends(get_db),
) -> LocationCollection:
    """
    Search POIs within ``radius`` kilometers of ``latitude``/``longitude``.

    Results are ordered by rank, then name. Distance from the center does
    not affect ordering.
    """
    result = await poi_search.search_by_radius(
        db, center, radius_km, categories, page.limit, page.offset
    )
    return _collection(result, query, page)


@router.get("/by-square", response_model=LocationCollection, response_model_exclude_none=True)
async def search_by_square(
    box: BoundingBox = Depends(bounding_box_params),
    categories: list[POICategory] | None = Depends(category_params),
    page: Pagination = Depends(pagination_params),
    query: dict[str, list[str]] = Depends(query_params_dict),
    db: AsyncSession = Depends(get_db),
) -> LocationCollection:
    """Search POIs inside a north/south/east/west box. ``west > east`` crosses the antimeridian."""
    result = await poi_search.search_by_bounding_box(
        db, box, categories, page.limit, page.offset
    )
    return _collection(result, query, page, f"{POIS_PATH}/by-square")


@router.get("/by-name", response_model=LocationCollection, response_model_exclude_none=True)
async def search_by_name(
    name: str | None = Query(default=None),
    categories: list[POICategory] | None = Depends(category_params),
    page: Pagination = Depends(pagination_params),
    query: dict[str, list[str]] = Depends(query_params_dict),
    db: AsyncSession = Depends(get_db),
) -> LocationCollection:
    """Case-insensitive substring search on POI names."""
    substring = validate_name_query(name)
    result = await poi_search.search_by_name(db, substring, categories, page.limit, page.offset)
    return _collection(result, query, page, f"{POIS_PATH}/by-name")


@router.get("/categories", response_model=CategoryList)
async def list_categories(db: AsyncSession = Depends(get_db)) -> CategoryList:
    """Categories that currently have at least one POI."""
    return CategoryList(data=await poi_search.list_categories(db))


@router.get("/statistics", response_model=PoiStatisticsResponse)
async def get_statistics(db: AsyncSession = Depends(get_db)) -> PoiStatisticsResponse:
    return PoiStatisticsResponse(data=await poi_search.get_statistics(db))


@router.get("/{poi_id}", response_model=LocationResponse)
async def get_poi(poi_id: str, db: AsyncSession = Depends(get_db)) -> LocationResponse:
    """Get a single POI by ID."""
    poi = await poi_search.get_poi_or_404(db, poi_id)
    return LocationResponse(data=format_location(poi, settings.base_url))


@router.get(
    "/{poi_id}/bookings",
    response_model=BookedSlotCollection,
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_user)],
)
async def list_booked_slots(
    poi_id: str,
    page: Pagination = Depends(pagination_params),
    query: dict[str, list[str]] = Depends(query_params_dict),
    db: AsyncSession = Depends(get_db),
) -> BookedSlotCollection:
    """
    Booked date ranges for a POI, earliest first.

    Only the intervals are returned; who booked them is never exposed.
    """
    result = await booking_service.list_poi_bookings(db, poi_id, page.limit, page.offset)
    return BookedSlotCollection(
        data=[format_booked_slot(b) for b in result.items],
        meta=build_pagination_meta(
            settings.base_url,
            f"{POIS_PATH}/{poi_id}/bookings",
            query,
            result.total_count,
            page.limit,
            page.offset,
        ),
    )
