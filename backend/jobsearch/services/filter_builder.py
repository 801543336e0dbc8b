"""
Translates SearchFilters into query predicates.

Predicates come in two phases. Structural clauses are plain column
comparisons and run inside the SQL query. Location and radius matching need
per-row text processing or trigonometry, so they are deferred and applied
in-process over the rows the query returns.
"""
from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, String, func, or_

from jobsearch.models.job import Job, OPEN_STATUS
from jobsearch.models.tag import Tag
from jobsearch.schemas.search import SearchFilters
from jobsearch.utils.geo import within_radius
from jobsearch.utils.location import location_matches


def text_contains(column, text: str) -> ColumnElement[bool]:
    """Case-insensitive substring match, Unicode aware."""
    return func.casefold(column, type_=String).contains(text.casefold(), autoescape=True)


@dataclass(frozen=True)
class GeoFilter:
    latitude: float
    longitude: float
    max_distance: float

    def matches(self, job: Job) -> bool:
        return within_radius(self.latitude, self.longitude, job.latitude, job.longitude, self.max_distance)


@dataclass(frozen=True)
class Predicates:
    clauses: list[ColumnElement[bool]] = field(default_factory=list)
    location: str | None = None
    geo: GeoFilter | None = None

    def apply_post_filters(self, jobs: list[Job]) -> list[Job]:
        """Location first, then radius."""
        if self.location is not None:
            jobs = [j for j in jobs if location_matches(j.location, self.location)]
        if self.geo is not None:
            jobs = [j for j in jobs if self.geo.matches(j)]
        return jobs


def build_predicates(filters: SearchFilters) -> Predicates:
    clauses: list[ColumnElement[bool]] = [Job.status == OPEN_STATUS]

    if filters.query is not None:
        clauses.append(
            or_(
                text_contains(Job.title, filters.query),
                text_contains(Job.summary, filters.query),
                text_contains(Job.description, filters.query),
            )
        )
    if filters.category is not None:
        clauses.append(Job.category == filters.category)
    if filters.tags:
        clauses.append(Job.tags.any(Tag.name.in_(filters.tags)))
    if filters.min_price is not None:
        clauses.append(Job.price >= filters.min_price)
    if filters.max_price is not None:
        clauses.append(Job.price <= filters.max_price)
    if filters.remote_ok is not None:
        clauses.append(Job.remote_ok == filters.remote_ok)
    if filters.urgency is not None:
        clauses.append(Job.urgency == filters.urgency)
    if filters.experience_level is not None:
        clauses.append(Job.experience_level == filters.experience_level)
    if filters.materials_provided is not None:
        clauses.append(Job.materials_provided == filters.materials_provided)
    if filters.start_date_from is not None:
        clauses.append(Job.start_date >= filters.start_date_from)
    if filters.start_date_to is not None:
        clauses.append(Job.start_date <= filters.start_date_to)

    location = None
    if filters.location is not None:
        clauses.append(Job.location.is_not(None))
        location = filters.location

    geo = None
    if filters.has_geo:
        clauses.append(Job.latitude.is_not(None))
        clauses.append(Job.longitude.is_not(None))
        geo = GeoFilter(filters.latitude, filters.longitude, filters.max_distance)

    return Predicates(clauses=clauses, location=location, geo=geo)
