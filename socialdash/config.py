# socialdash/config.py

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Единый конфиг проекта. Читает переменные окружения.
    Pydantic v2 + pydantic-settings.
    """
    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # --- Основные настройки ---
    ENVIRONMENT: str = Field("dev", description="Application environment (dev, test, prod)")

    # --- База данных ---
    DATABASE_URL: str = Field(..., description="Async database connection URL (e.g., postgresql+asyncpg://...)")

    # --- Redis / Celery ---
    REDIS_URL: str = Field("redis://redis:6379/0", description="URL for Redis connection")
    CELERY_BROKER_URL: Optional[str] = Field(None, description="Celery broker URL (defaults to REDIS_URL)")
    CELERY_RESULT_BACKEND: Optional[str] = Field(None, description="Celery result backend URL (defaults to REDIS_URL)")

    # --- JWT ---
    JWT_SECRET_KEY: str = Field(..., description="Secret key for signing JWT tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Algorithm for JWT signing")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7, description="JWT access token lifetime in minutes")

    # --- Event store ---
    EVENT_STORE: str = Field("sql", description="Event store backend ('sql', 'memory')")
    STORE_TIMEOUT_SECONDS: float = Field(5.0, gt=0, description="Upper bound for a single store operation")
    STORE_RETRY_ATTEMPTS: int = Field(2, ge=1, description="Total attempts per store operation (1 = no retry)")

    # --- ICS export ---
    ICS_PRODUCT_ID: str = Field("-//SocialDashboard//Content Calendar//EN", description="PRODID of exported feeds")

    @model_validator(mode='after')
    def set_celery_defaults(self) -> 'Settings':
        if self.CELERY_BROKER_URL is None:
            log.debug("Setting CELERY_BROKER_URL default from REDIS_URL")
            self.CELERY_BROKER_URL = self.REDIS_URL
        if self.CELERY_RESULT_BACKEND is None:
            log.debug("Setting CELERY_RESULT_BACKEND default from REDIS_URL")
            self.CELERY_RESULT_BACKEND = self.REDIS_URL
        return self

    @model_validator(mode='after')
    def check_event_store(self) -> 'Settings':
        self.EVENT_STORE = self.EVENT_STORE.lower()
        if self.EVENT_STORE not in ("sql", "memory"):
            raise ValueError(f"Unknown EVENT_STORE: {self.EVENT_STORE}")
        return self


# --- Создание единственного экземпляра настроек ---
try:
    settings = Settings()
    log.info("Settings loaded successfully for ENVIRONMENT=%s", settings.ENVIRONMENT)
    log.debug("Loaded settings: DB URL=%s..., store=%s, store timeout=%.1fs",
              str(settings.DATABASE_URL)[:25],
              settings.EVENT_STORE,
              settings.STORE_TIMEOUT_SECONDS)
except Exception:
    log.exception("Failed to instantiate Settings.")
    raise
