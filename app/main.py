from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every problem so the operator can fix all of
    them in one restart cycle.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    app_env = os.getenv("APP_ENV", "development").strip().lower()
    if app_env not in {"development", "staging", "production"}:
        errors.append(
            f"APP_ENV='{app_env}' is not valid. "
            "Allowed values: ['development', 'production', 'staging']."
        )

    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not (database_url or cloud_database_url or local_database_url):
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    digest_flag = os.getenv("STATS_DIGEST_ENABLED", "").strip().lower()
    digest_on = digest_flag in {"1", "true", "yes", "on"} or (
        not digest_flag and app_env == "development"
    )
    if digest_on and not os.getenv("DISCORD_WEBHOOK_URL", "").strip():
        # Not fatal: the sink drops messages with a warning.
        logging.getLogger(__name__).warning(
            "Stats digest is enabled but DISCORD_WEBHOOK_URL is not set; "
            "digests will be dropped."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Abort startup when a table registered on Base.metadata is missing from
    the database. Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch, %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema, own the digest scheduler for the app's lifetime."""
    log = logging.getLogger(__name__)
    _check_db()
    log.info("Database connectivity confirmed")
    _check_schema()
    log.info("Database schema validated")

    from app.scheduler.jobs import build_digest_scheduler

    digest_scheduler = build_digest_scheduler()
    application.state.digest_scheduler = digest_scheduler
    if digest_scheduler is not None:
        digest_scheduler.start()
    try:
        yield
    finally:
        if digest_scheduler is not None:
            digest_scheduler.stop(wait=True)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Product Sourcing API",
        version="0.1.0",
        lifespan=_lifespan,
    )

    from app.api.dependencies import SERVER_ERROR_MESSAGE, error_response
    from app.api.routers import dashboard_stats_router, products_router

    application.include_router(dashboard_stats_router)
    application.include_router(products_router)

    @application.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logging.getLogger(__name__).exception(
            "Unhandled error path=%s", request.url.path, exc_info=exc
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
