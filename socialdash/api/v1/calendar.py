# socialdash/api/v1/calendar.py

from __future__ import annotations

import contextlib
import logging
from datetime import date
from typing import Iterator, List, Literal, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from socialdash.core.auth.security import get_current_user_id
from socialdash.core.calendar import (
    BaseEventStore,
    CalendarEvent,
    CalendarSubscription,
    EventCreate,
    EventUpdate,
    NotFoundError,
    StorageError,
    get_event_store,
)
from socialdash.core.calendar.schemas import EventBase
from socialdash.core.extractor import EventScheduler, contains_scheduling_phrase

router = APIRouter(
    prefix="/v1/calendar",
    tags=["calendar"],
    dependencies=[Depends(get_current_user_id)],  # Защищаем весь роутер
)
log = logging.getLogger(__name__)


def get_store() -> BaseEventStore:
    return get_event_store()


@contextlib.contextmanager
def _store_errors(owner_id: str) -> Iterator[None]:
    """Переводит ошибки хранилища в HTTP-ответы."""
    try:
        yield
    except NotFoundError as exc:
        log.info("[API /calendar] %s (owner '%s')", exc, owner_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StorageError as exc:
        log.error("[API /calendar] Storage unavailable for owner '%s': %s", owner_id, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Calendar storage is unavailable"
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# --- Модели Запроса/Ответа ---
class EventIn(EventBase):
    """Событие от пользователя (владелец берется из токена)."""


class AIMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, description="Ответ ассистента из чата")
    reference_date: Optional[date] = Field(None, description="Опорная дата (по умолчанию сегодня)")
    require_scheduling_phrase: bool = Field(
        True, description="Пропускать сообщения без фразы о планировании"
    )


class AIMessageResponse(BaseModel):
    status: Literal["ok", "date_unresolved", "storage_error", "no_scheduling_phrase"]
    event_id: Optional[str] = None
    event: Optional[CalendarEvent] = None


class SubscriptionIn(BaseModel):
    name: Optional[str] = Field(None, max_length=128)


# --- Events ---
@router.get("/events", response_model=List[CalendarEvent])
async def list_events(
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> List[CalendarEvent]:
    with _store_errors(owner_id):
        return await store.list_events(owner_id)


@router.post("/events", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventIn = Body(...),
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> CalendarEvent:
    log.info("[API /calendar] Owner '%s' creates event '%s'", owner_id, payload.title)
    with _store_errors(owner_id):
        event_id = await store.create_event(EventCreate(owner_id=owner_id, **payload.model_dump()))
        return await store.get_event(owner_id, event_id)


@router.get("/events/{event_id}", response_model=CalendarEvent)
async def get_event(
    event_id: str,
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> CalendarEvent:
    with _store_errors(owner_id):
        return await store.get_event(owner_id, event_id)


@router.patch("/events/{event_id}", response_model=CalendarEvent)
async def update_event(
    event_id: str,
    payload: EventUpdate = Body(...),
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> CalendarEvent:
    with _store_errors(owner_id):
        return await store.update_event(owner_id, event_id, payload.model_dump(exclude_unset=True))


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> Response:
    with _store_errors(owner_id):
        await store.delete_event(owner_id, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- AI chat bridge ---
@router.post(
    "/ai-messages",
    response_model=AIMessageResponse,
    summary="Schedule content from an AI chat message",
    description="Extracts date, title and description from the assistant's reply and creates an all-day event.",
)
async def schedule_from_ai_message(
    payload: AIMessageRequest = Body(...),
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> AIMessageResponse:
    log.info("[API /calendar] AI message from owner '%s': '%.50s...'", owner_id, payload.message)
    if payload.require_scheduling_phrase and not contains_scheduling_phrase(payload.message):
        log.debug("[API /calendar] No scheduling phrase, skipping")
        return AIMessageResponse(status="no_scheduling_phrase")

    result = await EventScheduler(store).schedule(payload.message, owner_id, payload.reference_date)
    if not result.ok:
        return AIMessageResponse(status=result.status)

    # Событие уже создано: сбой повторного чтения не должен превращаться в 503
    try:
        event = await store.get_event(owner_id, result.event_id)
    except StorageError as exc:
        log.warning(
            "[API /calendar] Event %s created but could not be read back for owner '%s': %s",
            result.event_id, owner_id, exc,
        )
        event = None
    return AIMessageResponse(status="ok", event_id=result.event_id, event=event)


# --- Subscriptions ---
@router.get("/subscriptions", response_model=List[CalendarSubscription])
async def list_subscriptions(
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> List[CalendarSubscription]:
    with _store_errors(owner_id):
        return await store.list_subscriptions(owner_id)


@router.post("/subscriptions", response_model=CalendarSubscription, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: Optional[SubscriptionIn] = Body(None),
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> CalendarSubscription:
    with _store_errors(owner_id):
        return await store.create_subscription(owner_id, payload.name if payload else None)


@router.delete("/subscriptions/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: str,
    owner_id: str = Depends(get_current_user_id),
    store: BaseEventStore = Depends(get_store),
) -> Response:
    with _store_errors(owner_id):
        await store.delete_subscription(owner_id, subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
