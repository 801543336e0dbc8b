from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "JobSearch"
    api_prefix: str = "/api/v1"
    # Browser origins allowed to call the API; empty disables CORS.
    cors_origins: list[str] = []

    # Cache sizing and lifetimes (seconds)
    cache_maxsize: int = 1024
    search_cache_ttl_seconds: int = 300  # 5 minutes
    aggregate_cache_ttl_seconds: int = 900  # 15 minutes
    suggestions_cache_ttl_seconds: int = 60

    default_page_size: int = 20
    max_page_size: int = 100
    default_tag_limit: int = 20
    default_suggestion_limit: int = 10

    # SQLite busy timeout; bounds how long a search waits on the data source.
    db_timeout_seconds: float = 5.0

    @property
    def db_path(self) -> Path:
        return self.data_dir / "jobs.sqlite"

    model_config = {"env_prefix": "JOBSEARCH_"}


settings = Settings()
