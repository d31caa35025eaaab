# socialdash/db/base.py

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import (
    async_sessionmaker,
    AsyncSession,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from socialdash.config import settings

log = logging.getLogger(__name__)

# --- Declarative Base ---
class Base(DeclarativeBase):
    pass

# --- Engine & Session factory ---
if settings.ENVIRONMENT == "test":
    # Одно соединение на весь процесс, иначе in-memory база у каждого соединения своя
    log.info("Using in-memory SQLite database (aiosqlite) for tests.")
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
else:
    log.info("Using ASYNC PostgreSQL database: %s", settings.DATABASE_URL[:25])
    if not settings.DATABASE_URL.startswith("postgresql+asyncpg://"):
        log.warning("DATABASE_URL does not start with 'postgresql+asyncpg://'.")
        raise ValueError("DATABASE_URL must use 'asyncpg' driver for async operations.")

    engine = create_async_engine(
        settings.DATABASE_URL, echo=(settings.ENVIRONMENT == "dev"), pool_pre_ping=True
    )

async_session_factory = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


# --- Создание схемы (локальный запуск без alembic) ---
async def create_db_and_tables() -> None:
    # модели должны быть зарегистрированы в Base.metadata
    import socialdash.core.calendar.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.debug("Database tables created.")


__all__ = ["Base", "engine", "async_session_factory", "create_db_and_tables"]
