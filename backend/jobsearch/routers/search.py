from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from jobsearch.config import settings
from jobsearch.dependencies import get_search_service
from jobsearch.schemas.search import (
    CacheStatsResponse,
    CategoriesResponse,
    Pagination,
    SearchFilters,
    SearchJobsResponse,
    SortField,
    SuggestionsResponse,
    TagsResponse,
)
from jobsearch.services.search_service import SearchService

router = APIRouter(prefix="/search", tags=["search"])


def _split_tags(tags: list[str] | None) -> list[str] | None:
    # ?tags=a&tags=b and ?tags=a,b are equivalent
    if not tags:
        return None
    return [t.strip() for value in tags for t in value.split(",") if t.strip()]


@router.get("/jobs", response_model=SearchJobsResponse)
async def search_jobs(
    query: str | None = None,
    category: str | None = None,
    tags: list[str] | None = Query(None),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    location: str | None = None,
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
    max_distance: float | None = Query(None, alias="maxDistance", ge=0),
    remote_ok: bool | None = Query(None, alias="remoteOk"),
    urgency: Literal["low", "medium", "high"] | None = None,
    experience_level: Literal["beginner", "intermediate", "expert"] | None = Query(None, alias="experienceLevel"),
    materials_provided: bool | None = Query(None, alias="materialsProvided"),
    start_date_from: datetime | None = Query(None, alias="startDateFrom"),
    start_date_to: datetime | None = Query(None, alias="startDateTo"),
    sort_by: SortField = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: SearchService = Depends(get_search_service),
):
    try:
        filters = SearchFilters(
            query=query,
            category=category,
            tags=_split_tags(tags),
            min_price=min_price,
            max_price=max_price,
            location=location,
            latitude=latitude,
            longitude=longitude,
            max_distance=max_distance,
            remote_ok=remote_ok,
            urgency=urgency,
            experience_level=experience_level,
            materials_provided=materials_provided,
            start_date_from=start_date_from,
            start_date_to=start_date_to,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc

    result = service.search_jobs(filters)
    return SearchJobsResponse(
        data=result.items,
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get("/tags", response_model=TagsResponse)
async def popular_tags(
    limit: int = Query(settings.default_tag_limit, ge=1, le=settings.max_page_size),
    service: SearchService = Depends(get_search_service),
):
    return TagsResponse(data=service.get_popular_tags(limit))


@router.get("/categories", response_model=CategoriesResponse)
async def categories(service: SearchService = Depends(get_search_service)):
    return CategoriesResponse(data=service.get_categories())


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    query: str | None = None,
    limit: int = Query(settings.default_suggestion_limit, ge=1, le=settings.max_page_size),
    service: SearchService = Depends(get_search_service),
):
    if not query:
        return SuggestionsResponse(data=[])
    return SuggestionsResponse(data=service.get_suggestions(query, limit))


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(service: SearchService = Depends(get_search_service)):
    return CacheStatsResponse(data=service.cache.get_stats())
