from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JobResponse(BaseModel):
    """Snapshot of a job as returned by search; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    summary: str | None = None
    description: str | None = None
    category: str | None = None
    tags: list[str] = []
    price: float | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    remote_ok: bool = False
    urgency: str | None = None
    experience_level: str | None = None
    materials_provided: bool = False
    start_date: datetime | None = None
    status: str
    views: int = 0
    created_at: datetime
