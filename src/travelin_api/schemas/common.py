"""Shared schema building blocks."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Wire model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(BaseModel, Generic[T]):
    """One slice of an ordered result plus the size of the whole result."""

    model_config = ConfigDict(frozen=True)

    items: list[T]
    total_count: int = Field(..., ge=0)


class SelfLink(ApiModel):
    href: str
    methods: list[str]


class PaginationLinks(ApiModel):
    self_link: str = Field(..., alias="self")
    first: str
    last: str
    previous: str | None = None
    next: str | None = None
    up: str


class CollectionMeta(ApiModel):
    count: int
    links: PaginationLinks


class MessageData(ApiModel):
    message: str


class MessageResponse(ApiModel):
    data: MessageData
