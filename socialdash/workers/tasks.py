# socialdash/workers/tasks.py

from __future__ import annotations

import asyncio
from datetime import date
from typing import Optional

from celery import Celery
from celery.utils.log import get_task_logger

from socialdash.config import settings
from socialdash.core.calendar import get_event_store
from socialdash.core.extractor import EventScheduler

log = get_task_logger(__name__)

celery_app = Celery(
    "socialdash",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['socialdash.workers.tasks'],
    task_serializer='json',
    result_serializer='json',
    accept_content=['json']
)
celery_app.conf.update(
    task_track_started=True,
    timezone='UTC',
    broker_connection_retry_on_startup=True,
)


# --- Внутренняя асинхронная логика для задачи ---
async def _run_schedule_logic(
    task_id: str,
    owner_id: str,
    message: str,
    reference: Optional[date],
) -> dict[str, Optional[str]]:
    log.info("[schedule_from_message %s] owner '%s', message '%.50s...'", task_id, owner_id, message)
    store = get_event_store()
    try:
        result = await EventScheduler(store).schedule(message, owner_id, reference)
    finally:
        # каждый запуск задачи идёт в новом event loop (asyncio.run)
        await store.aclose()
    log.info("[schedule_from_message %s] finished with status %s", task_id, result.status)
    return {"status": result.status, "event_id": result.event_id}


@celery_app.task(
    name="socialdash.workers.tasks.schedule_from_message_task",
    bind=True,
)
def schedule_from_message_task(
    self,
    owner_id: str,
    message: str,
    reference_iso: str | None = None,
) -> dict[str, Optional[str]]:
    """
    Фоновая задача: разобрать ответ ассистента и создать событие.
    Ошибки хранилища уже превращены сервисом в status='storage_error', задача их не повторяет.
    """
    reference = date.fromisoformat(reference_iso) if reference_iso else None
    return asyncio.run(_run_schedule_logic(self.request.id or "eager", owner_id, message, reference))


__all__ = ["celery_app", "schedule_from_message_task"]
