from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from sqlalchemy import inspect as sa_inspect
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.schemas.prices import HealthResponse
from db.models import Price
from db.session import get_engine

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any database connection is initialised and raises
    RuntimeError listing every problem so all can be fixed in one restart.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not database_url and not cloud_database_url and not local_database_url:
        errors.append(
            "No database URL configured. Set DATABASE_URL, or configure "
            "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
        )

    raw_upload_limit = os.getenv("PRICE_UPLOAD_MAX_BYTES", "").strip()
    if raw_upload_limit and not raw_upload_limit.isdigit():
        errors.append(
            f"PRICE_UPLOAD_MAX_BYTES='{raw_upload_limit}' is not a positive integer."
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


def _check_db(engine: Engine) -> None:
    """Run SELECT 1 against the price store. Raises RuntimeError if it is unreachable."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise RuntimeError("Price store database unavailable.") from exc


def _check_schema(engine: Engine) -> None:
    """
    Require the prices table with every mapped column to exist.

    Does NOT auto-migrate.
    """

    table = Price.__table__
    inspector = sa_inspect(engine)
    if not inspector.has_table(table.name):
        logger.critical("Table %r is missing. Run 'alembic upgrade head' and restart.", table.name)
        raise RuntimeError(f"Price store schema missing: table {table.name!r} not found.")

    actual = {column["name"] for column in inspector.get_columns(table.name)}
    missing = sorted(set(table.columns.keys()) - actual)
    if missing:
        logger.critical(
            "Table %r lacks column(s) %s. Run 'alembic upgrade head' and restart.",
            table.name,
            ", ".join(missing),
        )
        raise RuntimeError(
            f"Price store schema mismatch: {table.name!r} lacks {', '.join(missing)}."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate price store connectivity and schema on boot."""
    engine = get_engine()
    _check_db(engine)
    logger.info("Price store connectivity confirmed")
    _check_schema(engine)
    logger.info("Price store schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Price Archive API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import prices_router

    application.include_router(prices_router)

    @application.get("/health")
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok")

    return application


app = create_app()
