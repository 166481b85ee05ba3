"""Favorite repository - data access for user favorites."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from travelin_api.models import UserFavorite as FavoriteModel
from travelin_api.repositories.poi import _to_schema as _poi_to_schema
from travelin_api.schemas import FavoriteRecord, Page


def _ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC). SQLite returns naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


async def get_favorite(db: AsyncSession, user_id: UUID, poi_id: str) -> FavoriteRecord | None:
    result = await db.execute(
        select(FavoriteModel).where(
            FavoriteModel.user_id == user_id, FavoriteModel.poi_id == poi_id
        )
    )
    favorite = result.scalar_one_or_none()
    if favorite is None:
        return None
    return _to_schema(favorite)


async def insert_favorite(db: AsyncSession, user_id: UUID, poi_id: str) -> FavoriteRecord:
    favorite = FavoriteModel(user_id=user_id, poi_id=poi_id)
    db.add(favorite)
    await db.commit()
    await db.refresh(favorite)
    return _to_schema(favorite)


async def delete_favorite(db: AsyncSession, user_id: UUID, poi_id: str) -> bool:
    result = await db.execute(
        delete(FavoriteModel).where(
            FavoriteModel.user_id == user_id, FavoriteModel.poi_id == poi_id
        )
    )
    await db.commit()
    return result.rowcount > 0


async def list_favorites_for_user(
    db: AsyncSession, user_id: UUID, limit: int, offset: int
) -> Page[FavoriteRecord]:
    """A user's favorites with their POIs, most recently added first."""
    total = await db.scalar(
        select(func.count(FavoriteModel.id)).where(FavoriteModel.user_id == user_id)
    )
    result = await db.execute(
        select(FavoriteModel)
        .where(FavoriteModel.user_id == user_id)
        .options(selectinload(FavoriteModel.poi))
        .order_by(FavoriteModel.created_at.desc(), FavoriteModel.poi_id)
        .limit(limit)
        .offset(offset)
    )
    items = [_to_schema(f, with_poi=True) for f in result.scalars().all()]
    return Page[FavoriteRecord](items=items, total_count=total or 0)


async def count_favorites_for_poi(db: AsyncSession, poi_id: str) -> int:
    total = await db.scalar(
        select(func.count(FavoriteModel.id)).where(FavoriteModel.poi_id == poi_id)
    )
    return total or 0


def _to_schema(favorite: FavoriteModel, with_poi: bool = False) -> FavoriteRecord:
    return FavoriteRecord(
        id=favorite.id,
        user_id=favorite.user_id,
        poi_id=favorite.poi_id,
        created_at=_ensure_utc(favorite.created_at),
        poi=_poi_to_schema(favorite.poi) if with_poi and favorite.poi is not None else None,
    )
