"""POI schemas - read model, seed input and wire representation."""

from pydantic import BaseModel, ConfigDict, Field

from travelin_api.geo import GeoPoint
from travelin_api.models.poi import POICategory, POISubType
from travelin_api.schemas.common import ApiModel, CollectionMeta, Page, SelfLink


class POI(BaseModel):
    """Immutable view of a stored point of interest."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    type: str = "location"
    sub_type: POISubType = POISubType.POINT_OF_INTEREST
    name: str
    latitude: float
    longitude: float
    category: POICategory
    rank: int = Field(default=100, ge=1)
    tags: list[str] = Field(default_factory=list)
    pictures: list[str] = Field(default_factory=list)

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)


SearchResult = Page[POI]


class POICreate(ApiModel):
    """Input for seeding a POI."""

    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    sub_type: POISubType = POISubType.POINT_OF_INTEREST
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    category: POICategory
    rank: int = Field(default=100, ge=1)
    tags: list[str] = Field(default_factory=list)
    pictures: list[str] = Field(default_factory=list)


class GeoCode(ApiModel):
    latitude: float
    longitude: float


class Location(ApiModel):
    """A POI as returned to clients."""

    id: str
    self_link: SelfLink = Field(..., alias="self")
    type: str
    sub_type: POISubType
    name: str
    geo_code: GeoCode
    category: POICategory
    rank: int
    tags: list[str]
    pictures: list[str]


class LocationResponse(ApiModel):
    data: Location


class LocationCollection(ApiModel):
    data: list[Location]
    meta: CollectionMeta


class CategoryList(ApiModel):
    data: list[POICategory]


class PoiStatistics(ApiModel):
    total: int
    categories: dict[str, int]


class PoiStatisticsResponse(ApiModel):
    data: PoiStatistics
