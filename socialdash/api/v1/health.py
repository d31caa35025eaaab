from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from socialdash.config import settings

router = APIRouter(tags=["infra"])
log = logging.getLogger(__name__)


async def _ping_broker() -> bool:
    r = Redis.from_url(settings.CELERY_BROKER_URL, socket_connect_timeout=2)
    try:
        return bool(await r.ping())
    finally:
        await r.aclose()


@router.get("/healthz")
async def healthz():
    out: dict[str, str] = {"environment": settings.ENVIRONMENT}

    # DB (только для SQL-хранилища)
    if settings.EVENT_STORE == "sql":
        from socialdash.db.base import engine

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            out["db"] = "ok"
        except SQLAlchemyError as exc:
            log.exception("DB health check failed")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error") from exc
    else:
        out["db"] = settings.EVENT_STORE

    # Redis (брокер Celery)
    try:
        if not await _ping_broker():
            raise RedisError("ping returned False")
        out["broker"] = "ok"
    except RedisError as exc:
        log.exception("Redis health check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="broker error") from exc

    return out
