"""POI repository - data access for points of interest.

Search queries here are deliberately unordered and unpaginated; ordering,
distance refinement and slicing belong to ``travelin_api.services.poi_search``.
"""

from collections.abc import Sequence

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.geo import BoundingBox
from travelin_api.models import PointOfInterest as POIModel
from travelin_api.models.poi import POICategory
from travelin_api.schemas import POI, POICreate


def _bounding_box_condition(box: BoundingBox):
    lat_condition = POIModel.latitude.between(box.south, box.north)
    if box.west == box.east:
        # Full longitude wrap
        return lat_condition
    if box.west < box.east:
        lon_condition = POIModel.longitude.between(box.west, box.east)
    else:
        # Crosses the antimeridian
        lon_condition = or_(POIModel.longitude >= box.west, POIModel.longitude <= box.east)
    return and_(lat_condition, lon_condition)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _category_values(categories: Sequence[POICategory] | None) -> list[str] | None:
    if not categories:
        return None
    return [c.value for c in categories]


async def get_poi(db: AsyncSession, poi_id: str) -> POI | None:
    """Get a POI by ID."""
    result = await db.execute(select(POIModel).where(POIModel.id == poi_id))
    poi = result.scalar_one_or_none()
    if poi is None:
        return None
    return _to_schema(poi)


async def poi_exists(db: AsyncSession, poi_id: str) -> bool:
    result = await db.execute(select(POIModel.id).where(POIModel.id == poi_id))
    return result.scalar_one_or_none() is not None


async def find_pois_in_bounding_box(
    db: AsyncSession,
    box: BoundingBox,
    categories: Sequence[POICategory] | None = None,
) -> list[POI]:
    """All POIs inside ``box``, optionally restricted to ``categories``."""
    query = select(POIModel).where(_bounding_box_condition(box))
    values = _category_values(categories)
    if values:
        query = query.where(POIModel.category.in_(values))
    result = await db.execute(query)
    return [_to_schema(p) for p in result.scalars().all()]


async def find_pois_by_name(
    db: AsyncSession,
    substring: str,
    categories: Sequence[POICategory] | None = None,
) -> list[POI]:
    """All POIs whose name contains ``substring``, ignoring case.

    PostgreSQL's ILIKE folds non-ASCII letters. SQLite only folds ASCII, so
    on other backends the match runs on case-folded names in Python.
    """
    needle = substring.strip()
    query = select(POIModel)
    values = _category_values(categories)
    if values:
        query = query.where(POIModel.category.in_(values))

    if db.get_bind().dialect.name == "postgresql":
        pattern = f"%{_escape_like(needle)}%"
        result = await db.execute(query.where(POIModel.name.ilike(pattern, escape="\\")))
        return [_to_schema(p) for p in result.scalars().all()]

    folded = needle.casefold()
    result = await db.execute(query)
    return [_to_schema(p) for p in result.scalars().all() if folded in p.name.casefold()]


async def list_categories(db: AsyncSession) -> list[POICategory]:
    """Categories that have at least one POI."""
    result = await db.execute(
        select(POIModel.category).group_by(POIModel.category).order_by(POIModel.category)
    )
    return [POICategory(c) for c in result.scalars().all()]


async def count_by_category(db: AsyncSession) -> dict[str, int]:
    result = await db.execute(
        select(POIModel.category, func.count(POIModel.id)).group_by(POIModel.category)
    )
    return {category: count for category, count in result.all()}


async def create_pois_bulk(db: AsyncSession, pois: list[POICreate]) -> list[POI]:
    """Create multiple POIs at once."""
    models = [_to_model(p) for p in pois]
    db.add_all(models)
    await db.commit()
    for m in models:
        await db.refresh(m)
    return [_to_schema(m) for m in models]


def _to_model(poi_create: POICreate) -> POIModel:
    return POIModel(
        id=poi_create.id,
        type="location",
        sub_type=poi_create.sub_type.value,
        name=poi_create.name,
        latitude=poi_create.latitude,
        longitude=poi_create.longitude,
        category=poi_create.category.value,
        rank=poi_create.rank,
        tags=list(poi_create.tags),
        pictures=list(poi_create.pictures),
    )


def _to_schema(poi: POIModel) -> POI:
    """Convert SQLAlchemy model to Pydantic schema."""
    return POI(
        id=poi.id,
        type=poi.type,
        sub_type=poi.sub_type,
        name=poi.name,
        latitude=float(poi.latitude),
        longitude=float(poi.longitude),
        category=poi.category,
        rank=poi.rank,
        tags=poi.tags or [],
        pictures=poi.pictures or [],
    )
