import logging
import sqlite3
from contextlib import asynccontextmanager, closing
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from jobsearch.config import settings
from jobsearch.routers import search

logger = logging.getLogger("jobsearch")


def run_startup_checks(db_path: Path) -> bool:
    """Create the schema if needed and run SQLite's integrity check."""
    try:
        from jobsearch.database import init_db
        init_db(db_path)
        with closing(sqlite3.connect(str(db_path))) as conn:
            result = conn.execute("PRAGMA integrity_check").fetchone()
    except Exception as exc:
        logger.error("Could not run startup schema/integrity check: %s", exc)
        return False
    if result and result[0] == "ok":
        logger.info("Database integrity check passed.")
        return True
    logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_checks(settings.db_path)
    yield


app = FastAPI(
    title="Job Search",
    description="Job search and discovery over open marketplace jobs",
    version="0.1.0",
    lifespan=lifespan,
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

app.include_router(search.router, prefix=settings.api_prefix)


@app.exception_handler(SQLAlchemyError)
async def data_source_error(request: Request, exc: SQLAlchemyError):
    logger.error("Data source failure on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Search is temporarily unavailable"},
    )


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
