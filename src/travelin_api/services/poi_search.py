"""Geo search engine.

Radius searches go through a bounding-box pre-filter in storage and are then
refined with the exact great-circle distance. All searches share one
ordering (rank, then name) and one pagination contract: ``total_count`` is
the size of the full ordered result and ``offset``/``limit`` slice it.
"""

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.errors import ResourceNotFoundError
from travelin_api.geo import BoundingBox, GeoPoint, bounding_box_for_radius, haversine_km
from travelin_api.models.poi import POICategory
from travelin_api.repositories import poi as poi_repo
from travelin_api.schemas import POI, PoiStatistics, SearchResult

logger = logging.getLogger(__name__)


def refine_within_radius(pois: Iterable[POI], center: GeoPoint, radius_km: float) -> list[POI]:
    """Drop POIs farther than ``radius_km`` from ``center``. The boundary is inclusive."""
    return [poi for poi in pois if haversine_km(center, poi.position) <= radius_km]


def rank_order(pois: Iterable[POI]) -> list[POI]:
    """Sort by rank ascending, then name, then id. Distance never takes part."""
    return sorted(pois, key=lambda poi: (poi.rank, poi.name, poi.id))


def paginate(pois: Sequence[POI], limit: int, offset: int) -> SearchResult:
    return SearchResult(items=list(pois[offset : offset + limit]), total_count=len(pois))


async def search_by_radius(
    db: AsyncSession,
    center: GeoPoint,
    radius_km: float,
    categories: Sequence[POICategory] | None = None,
    limit: int = 10,
    offset: int = 0,
) -> SearchResult:
    box = bounding_box_for_radius(center, radius_km)
    candidates = await poi_repo.find_pois_in_bounding_box(db, box, categories)
    matches = rank_order(refine_within_radius(candidates, center, radius_km))
    logger.debug(
        "Radius search center=(%s, %s) radius_km=%s candidates=%d matches=%d",
        center.latitude,
        center.longitude,
        radius_km,
        len(candidates),
        len(matches),
    )
    return paginate(matches, limit, offset)


async def search_by_bounding_box(
    db: AsyncSession,
    box: BoundingBox,
    categories: Sequence[POICategory] | None = None,
    limit: int = 10,
    offset: int = 0,
) -> SearchResult:
    matches = rank_order(await poi_repo.find_pois_in_bounding_box(db, box, categories))
    return paginate(matches, limit, offset)


async def search_by_name(
    db: AsyncSession,
    substring: str,
    categories: Sequence[POICategory] | None = None,
    limit: int = 10,
    offset: int = 0,
) -> SearchResult:
    matches = rank_order(await poi_repo.find_pois_by_name(db, substring, categories))
    return paginate(matches, limit, offset)


async def get_poi_or_404(db: AsyncSession, poi_id: str) -> POI:
    poi = await poi_repo.get_poi(db, poi_id)
    if poi is None:
        raise ResourceNotFoundError(
            f"Point of Interest not found: {poi_id}", {"parameter": "poisId"}
        )
    return poi


async def get_statistics(db: AsyncSession) -> PoiStatistics:
    counts = await poi_repo.count_by_category(db)
    return PoiStatistics(total=sum(counts.values()), categories=counts)


async def list_categories(db: AsyncSession) -> list[POICategory]:
    return await poi_repo.list_categories(db)
