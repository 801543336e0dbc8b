from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobsearch.config import settings
from jobsearch.schemas.job import JobResponse

SortField = Literal["createdAt", "price", "views", "startDate"]


class SearchFilters(BaseModel):
    """Job search request. ``None`` on any constraint field means "no constraint"."""

    model_config = ConfigDict(frozen=True)

    query: str | None = None
    category: str | None = None
    tags: tuple[str, ...] | None = None
    min_price: float | None = None
    max_price: float | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    max_distance: float | None = None  # kilometres
    remote_ok: bool | None = None
    urgency: Literal["low", "medium", "high"] | None = None
    experience_level: Literal["beginner", "intermediate", "expert"] | None = None
    materials_provided: bool | None = None
    start_date_from: datetime | None = None
    start_date_to: datetime | None = None
    sort_by: SortField = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"
    page: int = Field(1, ge=1)
    limit: int = Field(settings.default_page_size, ge=1, le=settings.max_page_size)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        # Tags form a set: order and duplicates never change the request.
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        unique = sorted({t for t in value if t})
        return tuple(unique) or None

    @field_validator("start_date_from", "start_date_to")
    @classmethod
    def _as_naive_utc(cls, value: datetime | None):
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @property
    def has_geo(self) -> bool:
        return (
            self.latitude is not None
            and self.longitude is not None
            and self.max_distance is not None
        )

    def cache_params(self) -> dict:
        return self.model_dump(mode="json")


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[JobResponse, ...]
    total: int
    page: int
    limit: int
    pages: int


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class SearchJobsResponse(BaseModel):
    success: bool = True
    data: list[JobResponse]
    pagination: Pagination


class TagCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag: str
    count: int


class CategoryCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    count: int


class TagsResponse(BaseModel):
    success: bool = True
    data: list[TagCount]


class CategoriesResponse(BaseModel):
    success: bool = True
    data: list[CategoryCount]


class SuggestionsResponse(BaseModel):
    success: bool = True
    data: list[str]


class CacheStatsResponse(BaseModel):
    success: bool = True
    data: dict
