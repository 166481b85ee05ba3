"""Favorites endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.config import settings
from travelin_api.database import get_db
from travelin_api.dependencies import get_current_user
from travelin_api.formatting import FAVORITES_PATH, build_pagination_meta, format_location
from travelin_api.schemas import (
    FavoriteAdded,
    FavoriteAddedResponse,
    FavoriteCheck,
    FavoriteCheckResponse,
    FavoriteCreate,
    LocationCollection,
    MessageData,
    MessageResponse,
)
from travelin_api.services import favorites as favorite_service
from travelin_api.validation import Pagination, pagination_params, query_params_dict

router = APIRouter(prefix=FAVORITES_PATH, tags=["favorites"])


@router.get("", response_model=LocationCollection, response_model_exclude_none=True)
async def list_favorites(
    page: Pagination = Depends(pagination_params),
    query: dict[str, list[str]] = Depends(query_params_dict),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> LocationCollection:
    """The caller's favorite POIs, most recently added first."""
    result = await favorite_service.list_favorites(db, user_id, page.limit, page.offset)
    return LocationCollection(
        data=[format_location(f.poi, settings.base_url) for f in result.items if f.poi],
        meta=build_pagination_meta(
            settings.base_url, FAVORITES_PATH, query, result.total_count, page.limit, page.offset
        ),
    )


@router.post("", response_model=FavoriteAddedResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    favorite: FavoriteCreate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> FavoriteAddedResponse:
    poi = await favorite_service.add_favorite(db, user_id, favorite.poi_id)
    return FavoriteAddedResponse(
        data=FavoriteAdded(
            message="POI added to favorites", poi=format_location(poi, settings.base_url)
        )
    )


@router.get("/{poi_id}/check", response_model=FavoriteCheckResponse)
async def check_favorite(
    poi_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> FavoriteCheckResponse:
    """Whether the caller has favorited the POI, and how many users have."""
    favorited = await favorite_service.is_favorited(db, user_id, poi_id)
    count = await favorite_service.favorite_count(db, poi_id)
    return FavoriteCheckResponse(
        data=FavoriteCheck(poi_id=poi_id, is_favorited=favorited, favorite_count=count)
    )


@router.delete("/{poi_id}", response_model=MessageResponse)
async def remove_favorite(
    poi_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> MessageResponse:
    await favorite_service.remove_favorite(db, user_id, poi_id)
    return MessageResponse(data=MessageData(message="POI removed from favorites"))
