"""User favorites: a set of POIs per user."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.errors import DuplicateFavoriteError, ResourceNotFoundError
from travelin_api.repositories import favorite as favorite_repo
from travelin_api.repositories import poi as poi_repo
from travelin_api.schemas import POI, FavoriteRecord, Page

logger = logging.getLogger(__name__)


async def add_favorite(db: AsyncSession, user_id: UUID, poi_id: str) -> POI:
    """Add a POI to the user's favorites and return the POI."""
    poi = await poi_repo.get_poi(db, poi_id)
    if poi is None:
        raise ResourceNotFoundError(
            f"Point of Interest not found: {poi_id}", {"parameter": "poiId"}
        )
    if await favorite_repo.get_favorite(db, user_id, poi_id) is not None:
        raise DuplicateFavoriteError(poi_id)

    try:
        await favorite_repo.insert_favorite(db, user_id, poi_id)
    except IntegrityError as exc:
        # Lost a race with a concurrent add of the same pair
        await db.rollback()
        raise DuplicateFavoriteError(poi_id) from exc

    logger.info("Favorite added: user_id=%s poi_id=%s", user_id, poi_id)
    return poi


async def remove_favorite(db: AsyncSession, user_id: UUID, poi_id: str) -> None:
    if not await favorite_repo.delete_favorite(db, user_id, poi_id):
        raise ResourceNotFoundError("Favorite not found", {"parameter": "poiId"})
    logger.info("Favorite removed: user_id=%s poi_id=%s", user_id, poi_id)


async def list_favorites(
    db: AsyncSession, user_id: UUID, limit: int = 10, offset: int = 0
) -> Page[FavoriteRecord]:
    return await favorite_repo.list_favorites_for_user(db, user_id, limit, offset)


async def is_favorited(db: AsyncSession, user_id: UUID, poi_id: str) -> bool:
    return await favorite_repo.get_favorite(db, user_id, poi_id) is not None


async def favorite_count(db: AsyncSession, poi_id: str) -> int:
    """How many users have favorited the POI."""
    return await favorite_repo.count_favorites_for_poi(db, poi_id)
