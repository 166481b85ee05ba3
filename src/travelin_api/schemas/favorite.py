"""Favorite schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from travelin_api.schemas.common import ApiModel
from travelin_api.schemas.poi import POI, Location


class FavoriteRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    user_id: UUID
    poi_id: str
    created_at: datetime
    poi: POI | None = None


class FavoriteCreate(ApiModel):
    poi_id: str = Field(..., min_length=1, max_length=64)


class FavoriteAdded(ApiModel):
    message: str
    poi: Location


class FavoriteAddedResponse(ApiModel):
    data: FavoriteAdded


class FavoriteCheck(ApiModel):
    poi_id: str
    is_favorited: bool
    favorite_count: int


class FavoriteCheckResponse(ApiModel):
    data: FavoriteCheck
