from __future__ import annotations
import logging

from fastapi import FastAPI

from socialdash.api.v1.calendar import router as calendar_router
from socialdash.api.v1.feed import router as feed_router
from socialdash.api.v1.health import router as health_router
from socialdash.config import settings

# Configure basic logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)
description = """
Content calendar for the social dashboard.
Turns assistant replies into calendar entries and serves them as an iCalendar feed.
"""
tags_metadata = [
    {"name": "calendar", "description": "Owner-scoped content events, AI scheduling and feed subscriptions."},
    {"name": "infra", "description": "Health checks."},
]

app = FastAPI(
    title="Social Dashboard Calendar API",
    description=description,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

app.include_router(feed_router)
app.include_router(calendar_router)
app.include_router(health_router)

log.info("\U0001F331 FastAPI application configured. Environment: %s, store: %s", settings.ENVIRONMENT, settings.EVENT_STORE)


@app.on_event("startup")
async def startup_event() -> None:
    if settings.ENVIRONMENT == "dev" and settings.EVENT_STORE == "sql":
        # В dev схема создаётся без alembic
        from socialdash.db.base import create_db_and_tables

        await create_db_and_tables()
    log.info("\U0001F680 FastAPI application startup complete.")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    log.info("\U0001F44B FastAPI application shutdown.")
