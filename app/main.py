from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.platforms.registry import PLATFORM_ENV_KEYS

DATABASE_URL_ENV_KEYS = ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")
NUMERIC_ENV_KEYS = (
    "SCAN_MAX_QUERIES_PER_REGION",
    "SCAN_MAX_KEYWORDS",
    "PLATFORM_HTTP_TIMEOUT_SECONDS",
    "SCRAPER_TIMEOUT_SECONDS",
)

logger = logging.getLogger(__name__)


def _is_number(raw: str) -> bool:
    try:
        float(raw)
    except ValueError:
        return False
    return True


def _validate_env() -> None:
    """
    Validate scanner environment variables before anything connects.

    Collects every problem into one RuntimeError. A missing database URL or a
    non-numeric tuning value is fatal; having no platform key only warns,
    because each scan then fails on its own with an explanatory message.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    if not any(os.getenv(key, "").strip() for key in DATABASE_URL_ENV_KEYS):
        errors.append(f"No database URL configured. Set one of: {', '.join(DATABASE_URL_ENV_KEYS)}.")

    for key in NUMERIC_ENV_KEYS:
        raw = os.getenv(key, "").strip()
        if raw and not _is_number(raw):
            errors.append(f"{key}='{raw}' is not a number.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    configured = [key for key in PLATFORM_ENV_KEYS if os.getenv(key, "").strip()]
    if not configured:
        logger.warning(
            "No AI platform API keys configured (%s); every scan will fail until one is set.",
            ", ".join(PLATFORM_ENV_KEYS),
        )


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Run SELECT 1 on the shared engine. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import get_engine

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError("Scan database unavailable.") from exc


def _check_schema() -> None:
    """
    Abort startup when any scan table is missing. Never migrates by itself.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    present = set(sa_inspect(get_engine()).get_table_names())
    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        logger.critical(
            "Scan tables absent from the database: %s. Run 'alembic upgrade head' and restart.",
            ", ".join(missing),
        )
        raise RuntimeError(f"Schema mismatch: missing table(s) {', '.join(missing)}. Run migrations and restart.")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _check_db()
    logger.info("Database connectivity confirmed")
    _check_schema()
    logger.info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Build the scanner API: scan endpoints plus the health probe.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="AI Visibility Scanner API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import health_router, scan_router

    application.include_router(scan_router)
    application.include_router(health_router)

    return application


app = create_app()
