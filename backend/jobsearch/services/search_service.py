"""
Job search, tag/category aggregation and suggestions over open jobs.

Every read goes through the TTL cache first. Results are cached as serialized
snapshots, so a cached page stays identical for its whole lifetime even if
the underlying rows change.
"""
import logging
import math
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from jobsearch.config import settings
from jobsearch.models.job import Job, OPEN_STATUS
from jobsearch.models.tag import Tag, job_tags
from jobsearch.schemas.job import JobResponse
from jobsearch.schemas.search import CategoryCount, SearchFilters, SearchResult, TagCount
from jobsearch.services.cache_service import CacheService, make_cache_key
from jobsearch.services.filter_builder import build_predicates, text_contains

logger = logging.getLogger(__name__)

MIN_SUGGESTION_QUERY_LENGTH = 2

_SORT_COLUMNS = {
    "createdAt": "created_at",
    "price": "price",
    "views": "views",
    "startDate": "start_date",
}


def job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        id=job.id,
        title=job.title,
        summary=job.summary,
        description=job.description,
        category=job.category,
        tags=sorted(t.name for t in job.tags),
        price=job.price,
        location=job.location,
        latitude=job.latitude,
        longitude=job.longitude,
        remote_ok=job.remote_ok,
        urgency=job.urgency,
        experience_level=job.experience_level,
        materials_provided=job.materials_provided,
        start_date=job.start_date,
        status=job.status,
        views=job.views,
        created_at=job.created_at,
    )


def sort_jobs(jobs: list[Job], sort_by: str, sort_order: str) -> list[Job]:
    """Stable sort; jobs missing the sort value go last in either direction."""
    attr = _SORT_COLUMNS[sort_by]
    present = [j for j in jobs if getattr(j, attr) is not None]
    missing = [j for j in jobs if getattr(j, attr) is None]
    present.sort(key=lambda j: getattr(j, attr), reverse=sort_order == "desc")
    return present + missing


class SearchService:
    def __init__(self, db: Session, cache: CacheService):
        self.db = db
        self.cache = cache

    # The cache is an optimization only: a failing cache degrades to a miss.
    def _cache_get(self, key: str) -> Any | None:
        try:
            return self.cache.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s, recomputing: %s", key, exc)
            return None

    def _cache_set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self.cache.set(key, value, ttl_seconds)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    def search_jobs(self, filters: SearchFilters) -> SearchResult:
        cache_key = make_cache_key("jobs", filters.cache_params())
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        predicates = build_predicates(filters)
        jobs = self.db.query(Job).filter(*predicates.clauses).order_by(Job.id).all()
        jobs = predicates.apply_post_filters(jobs)

        total = len(jobs)
        jobs = sort_jobs(jobs, filters.sort_by, filters.sort_order)
        start = (filters.page - 1) * filters.limit
        page_jobs = jobs[start:start + filters.limit]

        result = SearchResult(
            items=tuple(job_to_response(j) for j in page_jobs),
            total=total,
            page=filters.page,
            limit=filters.limit,
            pages=math.ceil(total / filters.limit),
        )
        logger.debug("Job search matched %d jobs (page %d)", total, filters.page)
        self._cache_set(cache_key, result, settings.search_cache_ttl_seconds)
        return result

    def get_popular_tags(self, limit: int = settings.default_tag_limit) -> list[TagCount]:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        cache_key = make_cache_key("tags", {"limit": limit})
        cached = self._cache_get(cache_key)
        if cached is not None:
            return list(cached)

        n = func.count(job_tags.c.job_id).label("n")
        rows = (
            self.db.query(Tag.name, n)
            .join(job_tags, job_tags.c.tag_id == Tag.id)
            .join(Job, Job.id == job_tags.c.job_id)
            .filter(Job.status == OPEN_STATUS)
            .group_by(Tag.name)
            .order_by(n.desc(), Tag.name.asc())
            .limit(limit)
            .all()
        )
        result = tuple(TagCount(tag=row.name, count=row.n) for row in rows)
        self._cache_set(cache_key, result, settings.aggregate_cache_ttl_seconds)
        return list(result)

    def get_categories(self) -> list[CategoryCount]:
        cache_key = make_cache_key("categories")
        cached = self._cache_get(cache_key)
        if cached is not None:
            return list(cached)

        n = func.count(Job.id).label("n")
        rows = (
            self.db.query(Job.category, n)
            .filter(Job.status == OPEN_STATUS, Job.category.is_not(None))
            .group_by(Job.category)
            .order_by(n.desc(), Job.category.asc())
            .all()
        )
        result = tuple(CategoryCount(category=row.category, count=row.n) for row in rows)
        self._cache_set(cache_key, result, settings.aggregate_cache_ttl_seconds)
        return list(result)

    def get_suggestions(self, query: str, limit: int = settings.default_suggestion_limit) -> list[str]:
        """
        Titles, categories and tags of open jobs containing ``query``.
        Queries shorter than two characters yield nothing.
        """
        if not query or len(query) < MIN_SUGGESTION_QUERY_LENGTH:
            return []
        if limit < 1:
            raise ValueError("limit must be at least 1")

        cache_key = make_cache_key("suggestions", {"query": query, "limit": limit})
        cached = self._cache_get(cache_key)
        if cached is not None:
            return list(cached)

        jobs = (
            self.db.query(Job)
            .filter(
                Job.status == OPEN_STATUS,
                or_(
                    text_contains(Job.title, query),
                    text_contains(Job.category, query),
                    Job.tags.any(text_contains(Tag.name, query)),
                ),
            )
            .order_by(Job.created_at.desc(), Job.id)
            .all()
        )

        needle = query.casefold()
        suggestions: dict[str, None] = {}
        for job in jobs:
            candidates = [job.title, job.category, *sorted(t.name for t in job.tags)]
            for candidate in candidates:
                if candidate and needle in candidate.casefold():
                    suggestions.setdefault(candidate, None)
            if len(suggestions) >= limit:
                break

        result = tuple(suggestions)[:limit]
        self._cache_set(cache_key, result, settings.suggestions_cache_ttl_seconds)
        return list(result)
