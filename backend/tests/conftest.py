import itertools
import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from jobsearch.database import _set_sqlite_pragmas, get_db, init_db
from jobsearch.dependencies import get_cache
from jobsearch.main import app
from jobsearch.models import Job, Tag
from jobsearch.services.cache_service import CacheService
from jobsearch.services.search_service import SearchService


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheService(maxsize=256, clock=clock)


@pytest.fixture
def test_db(tmp_path):
    db_path = tmp_path / "jobs.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    init_db(db_path)
    yield TestSession
    engine.dispose()


@pytest.fixture
def db_session(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def service(db_session, cache):
    return SearchService(db_session, cache)


@pytest.fixture
def make_job(db_session):
    """Insert a job; ``created_at`` increases with every call unless given."""
    counter = itertools.count()
    base = datetime(2025, 1, 1, 9, 0, 0)

    def _make(**fields) -> Job:
        tag_names = fields.pop("tags", [])
        values = {
            "id": str(uuid.uuid4()),
            "title": "Untitled job",
            "status": "open",
            "created_at": base + timedelta(minutes=next(counter)),
        }
        values.update(fields)
        job = Job(**values)
        for name in tag_names:
            tag = db_session.query(Tag).filter(Tag.name == name).first()
            if tag is None:
                tag = Tag(id=str(uuid.uuid4()), name=name)
                db_session.add(tag)
                db_session.flush()
            job.tags.append(tag)
        db_session.add(job)
        db_session.commit()
        return job

    return _make


@pytest.fixture
def client(test_db, cache):
    def override_get_db():
        db = test_db()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()
