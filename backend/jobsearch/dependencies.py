from fastapi import Depends
from sqlalchemy.orm import Session

from jobsearch.config import settings
from jobsearch.database import get_db
from jobsearch.services.cache_service import CacheService
from jobsearch.services.search_service import SearchService

# Process-wide cache shared by all requests.
search_cache = CacheService(maxsize=settings.cache_maxsize)


def get_cache() -> CacheService:
    return search_cache


def get_search_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> SearchService:
    return SearchService(db, cache)
