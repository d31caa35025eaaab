# socialdash/core/extractor/service.py

"""Service-layer: AI chat message → calendar event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional

from socialdash.core.calendar.base import BaseEventStore, StorageError
from socialdash.core.calendar.schemas import EventCreate, EventSource

from .extract import ExtractedEvent, extract_event

log = logging.getLogger(__name__)

ScheduleStatus = Literal["ok", "date_unresolved", "storage_error"]


@dataclass(frozen=True)
class ScheduleResult:
    """Итог попытки запланировать событие: либо event_id, либо причина отказа."""

    status: ScheduleStatus
    event_id: Optional[str] = None
    extracted: Optional[ExtractedEvent] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class EventScheduler:
    """
    Асинхронный сервис: разбирает сообщение ассистента и создаёт событие.
    Хранилище передаётся снаружи (DI), сервис не знает, SQL это или память.
    """

    def __init__(self, store: BaseEventStore) -> None:
        self.store: BaseEventStore = store

    async def schedule(
        self,
        message: str,
        owner_id: str,
        reference: date | datetime | None = None,
    ) -> ScheduleResult:
        """
        Пытается создать all-day событие (source=ai) из сообщения.

        Ошибки хранилища не пробрасываются: они логируются и возвращаются
        как ``status="storage_error"``.

        Args:
            message (str): Сообщение ассистента.
            owner_id (str): Владелец будущего события.
            reference (date | datetime | None): Опорная дата; по умолчанию сегодня.

        Returns:
            ScheduleResult: Результат с event_id или причиной отказа.
        """
        extracted = extract_event(message, reference)
        if extracted is None:
            log.info("Could not schedule message for owner %s: no date found", owner_id)
            return ScheduleResult(status="date_unresolved")

        payload = EventCreate(
            owner_id=owner_id,
            title=extracted.title,
            description=extracted.description,
            start_date=extracted.start_date,
            all_day=True,
            source=EventSource.AI,
        )
        try:
            event_id = await self.store.create_event(payload)
        except StorageError as exc:
            log.exception("Storage error while creating AI event for owner %s", owner_id)
            return ScheduleResult(status="storage_error", extracted=extracted, detail=str(exc))

        log.info(
            "Scheduled AI event %s for owner %s on %s (rule=%s, title='%s')",
            event_id, owner_id, extracted.date.isoformat(), extracted.rule, extracted.title,
        )
        return ScheduleResult(status="ok", event_id=event_id, extracted=extracted)

    async def extract_and_schedule_event(
        self,
        message: str,
        owner_id: str,
        reference: date | datetime | None = None,
    ) -> str | None:
        """Entry point for the chat UI: new event id, or None if nothing was scheduled."""
        result = await self.schedule(message, owner_id, reference)
        return result.event_id


__all__ = ["ScheduleStatus", "ScheduleResult", "EventScheduler"]
