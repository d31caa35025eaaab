# socialdash/core/calendar/memory.py

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from .base import BaseEventStore, NotFoundError, StorageError, check_update_fields
from .schemas import CalendarEvent, CalendarSubscription, EventCreate
from .tokens import generate_subscription_token

log = logging.getLogger(__name__)


class InMemoryEventStore(BaseEventStore):
    """
    Асинхронная заглушка-хранилище; хранит события в оперативной памяти.
    Для тестов и локального запуска без БД.
    """

    name: str = "memory"

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        # owner_id -> {event_id -> event}
        self._events: Dict[str, Dict[str, CalendarEvent]] = {}
        self._subscriptions: Dict[str, CalendarSubscription] = {}
        self._clock = clock
        # Позволяет тестам имитировать недоступность хранилища
        self.fail_writes: bool = False
        log.info("Initialized InMemoryEventStore")

    def _check_writable(self, operation: str) -> None:
        if self.fail_writes:
            raise StorageError(f"{operation} failed: store is unavailable")

    def _owned(self, owner_id: str, event_id: str) -> CalendarEvent:
        event = self._events.get(owner_id, {}).get(event_id)
        if event is None:
            raise NotFoundError("event", event_id, owner_id)
        return event

    async def list_events(self, owner_id: str) -> List[CalendarEvent]:
        events = sorted(
            self._events.get(owner_id, {}).values(),
            key=lambda ev: (ev.start_date, ev.created_at),
        )
        log.debug("Memory: Found %d events for owner %s", len(events), owner_id)
        return [ev.model_copy() for ev in events]

    async def get_event(self, owner_id: str, event_id: str) -> CalendarEvent:
        return self._owned(owner_id, event_id).model_copy()

    async def create_event(self, payload: EventCreate) -> str:
        self._check_writable("create_event")
        now = self._clock()
        event = CalendarEvent(
            **payload.model_dump(),
            id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now,
        )
        self._events.setdefault(payload.owner_id, {})[event.id] = event
        log.info("Memory: Event %s added for owner %s: '%s'", event.id, payload.owner_id, payload.title)
        return event.id

    async def update_event(
        self, owner_id: str, event_id: str, fields: Mapping[str, Any]
    ) -> CalendarEvent:
        self._check_writable("update_event")
        changes = check_update_fields(fields)
        current = self._owned(owner_id, event_id)
        updated = CalendarEvent.model_validate(
            {**current.model_dump(), **changes, "updated_at": self._clock()}
        )
        self._events[owner_id][event_id] = updated
        log.info("Memory: Event %s updated", event_id)
        return updated.model_copy()

    async def delete_event(self, owner_id: str, event_id: str) -> None:
        self._check_writable("delete_event")
        self._owned(owner_id, event_id)
        del self._events[owner_id][event_id]
        log.info("Memory: Event %s deleted", event_id)

    async def create_subscription(
        self, owner_id: str, name: Optional[str] = None
    ) -> CalendarSubscription:
        self._check_writable("create_subscription")
        subscription = CalendarSubscription(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            token=generate_subscription_token(owner_id),
            name=name,
            created_at=self._clock(),
        )
        self._subscriptions[subscription.id] = subscription
        return subscription

    async def list_subscriptions(self, owner_id: str) -> List[CalendarSubscription]:
        return [s for s in self._subscriptions.values() if s.owner_id == owner_id]

    async def delete_subscription(self, owner_id: str, subscription_id: str) -> None:
        self._check_writable("delete_subscription")
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None or subscription.owner_id != owner_id:
            raise NotFoundError("subscription", subscription_id, owner_id)
        del self._subscriptions[subscription_id]

    async def get_subscription_by_token(self, token: str) -> CalendarSubscription:
        for subscription in self._subscriptions.values():
            if subscription.token == token:
                return subscription
        raise NotFoundError("subscription", token[:8] + "...")


__all__ = ["InMemoryEventStore"]
