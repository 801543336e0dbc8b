import sqlite3
from contextlib import closing
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from jobsearch.config import settings


class Base(DeclarativeBase):
    pass


def _casefold(value):
    return value.casefold() if value is not None else None


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    # SQLite lower() only folds ASCII; casefold() covers accented letters too.
    dbapi_conn.create_function("casefold", 1, _casefold, deterministic=True)
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={
            "check_same_thread": False,
            "timeout": settings.db_timeout_seconds,
        },
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- JOBS
-- ============================================================
CREATE TABLE IF NOT EXISTS jobs (
    id                 TEXT PRIMARY KEY,
    title              TEXT NOT NULL,
    summary            TEXT,
    description        TEXT,
    category           TEXT,
    price              REAL,
    location           TEXT,
    latitude           REAL,
    longitude          REAL,
    remote_ok          INTEGER NOT NULL DEFAULT 0,
    urgency            TEXT CHECK(urgency IN ('low','medium','high')),
    experience_level   TEXT CHECK(experience_level IN ('beginner','intermediate','expert')),
    materials_provided INTEGER NOT NULL DEFAULT 0,
    start_date         TEXT,
    status             TEXT NOT NULL DEFAULT 'open',
    views              INTEGER NOT NULL DEFAULT 0,
    created_at         TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs(status);
CREATE INDEX IF NOT EXISTS idx_jobs_category ON jobs(category);
CREATE INDEX IF NOT EXISTS idx_jobs_price ON jobs(price);
CREATE INDEX IF NOT EXISTS idx_jobs_created ON jobs(created_at);

-- ============================================================
-- TAGS
-- ============================================================
CREATE TABLE IF NOT EXISTS tags (
    id   TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS job_tags (
    job_id TEXT NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    tag_id TEXT NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
    PRIMARY KEY (job_id, tag_id)
);

CREATE INDEX IF NOT EXISTS idx_job_tags_tag ON job_tags(tag_id);
"""


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(str(path))) as conn:
        conn.executescript(SCHEMA_SQL)
