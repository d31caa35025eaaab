# socialdash/core/calendar/schemas.py
"""
Pydantic-схемы календарных событий и подписок.

Используются в:
    * socialdash/api/v1/calendar.py        : REST-эндпоинты
    * socialdash/core/calendar/<store>.py  : маппинг ORM / памяти → CalendarEvent
    * socialdash/core/extractor/service.py : payload события из AI-сообщения
"""

from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EventSource(str, enum.Enum):
    """Откуда появилось событие."""

    MANUAL = "manual"
    AI = "ai"


class EventBase(BaseModel):
    """Общие поля события."""

    title: str = Field(..., min_length=1, description="Заголовок события")
    description: str = Field("", description="Описание, может содержать markdown")
    start_date: datetime = Field(..., description="Начало события (naive, локальное время)")
    end_date: datetime | None = Field(None, description="Окончание события (naive)")
    all_day: bool = Field(False, description="Событие на весь день")
    color: str | None = Field(None, description="Цветовая метка для UI")
    source: EventSource = Field(EventSource.MANUAL, description="manual | ai")


class EventCreate(EventBase):
    """Событие без id и отметок времени; их проставляет хранилище."""

    owner_id: str = Field(..., min_length=1, description="Владелец события")


class EventUpdate(BaseModel):
    """Частичное обновление. id, owner_id и created_at не меняются."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1)
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    all_day: bool | None = None
    color: str | None = None
    source: EventSource | None = None


class CalendarEvent(EventBase):
    """Событие, сохранённое в хранилище."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Идентификатор события в хранилище")
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CalendarSubscription(BaseModel):
    """Токен подписки на ICS-фид."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    token: str
    name: str | None = None
    created_at: datetime


__all__: list[str] = [
    "EventSource",
    "EventCreate",
    "EventUpdate",
    "CalendarEvent",
    "CalendarSubscription",
]
