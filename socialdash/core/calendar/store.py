# socialdash/core/calendar/store.py

"""SQLAlchemy-backed event store (PostgreSQL/asyncpg, SQLite in tests)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .base import BaseEventStore, NotFoundError, check_update_fields
from .models import CalendarEventORM, CalendarSubscriptionORM
from .resilience import RetryPolicy, policy_from_settings, run_with_retry
from .schemas import CalendarEvent, CalendarSubscription, EventCreate, EventSource
from .tokens import generate_subscription_token

log = logging.getLogger(__name__)

T = TypeVar("T")


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, EventSource) else value


class SqlEventStore(BaseEventStore):
    """
    Асинхронное хранилище событий поверх SQLAlchemy.

    Каждая операция открывает собственную сессию и транзакцию, выполняется
    под таймаутом и повторяется один раз при транзиентной ошибке.
    """

    name: str = "sql"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._session_factory = session_factory
        self._policy = policy or policy_from_settings()
        self._clock = clock

    async def _run(self, name: str, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def attempt() -> T:
            async with self._session_factory() as session:
                async with session.begin():
                    return await operation(session)

        return await run_with_retry(attempt, name=name, policy=self._policy)

    async def aclose(self) -> None:
        # Пул соединений привязан к event loop; перед закрытием loop его нужно сбросить
        engine = self._session_factory.kw.get("bind")
        if engine is not None:
            await engine.dispose()
            log.debug("SQL: Engine pool disposed")

    @staticmethod
    async def _owned_event(session: AsyncSession, owner_id: str, event_id: str) -> CalendarEventORM:
        stmt = select(CalendarEventORM).where(
            CalendarEventORM.id == event_id,
            CalendarEventORM.owner_id == owner_id,
        )
        row = (await session.execute(stmt)).scalar_one_or_none()
        if row is None:
            raise NotFoundError("event", event_id, owner_id)
        return row

    # ------------------------------------------------------------------ #
    #                              Events                                #
    # ------------------------------------------------------------------ #

    async def list_events(self, owner_id: str) -> List[CalendarEvent]:
        log.debug("SQL: Listing events for owner %s", owner_id)

        async def op(session: AsyncSession) -> List[CalendarEvent]:
            stmt = (
                select(CalendarEventORM)
                .where(CalendarEventORM.owner_id == owner_id)
                .order_by(CalendarEventORM.start_date, CalendarEventORM.created_at)
            )
            rows = (await session.scalars(stmt)).all()
            return [CalendarEvent.model_validate(row) for row in rows]

        events = await self._run("list_events", op)
        log.debug("SQL: Found %d events for owner %s", len(events), owner_id)
        return events

    async def get_event(self, owner_id: str, event_id: str) -> CalendarEvent:
        async def op(session: AsyncSession) -> CalendarEvent:
            return CalendarEvent.model_validate(await self._owned_event(session, owner_id, event_id))

        return await self._run("get_event", op)

    async def create_event(self, payload: EventCreate) -> str:
        log.info("SQL: Creating %s event for owner %s: '%s'", payload.source.value, payload.owner_id, payload.title)
        data = {key: _plain(value) for key, value in payload.model_dump().items()}

        async def op(session: AsyncSession) -> str:
            now = self._clock()
            row = CalendarEventORM(**data, created_at=now, updated_at=now)
            session.add(row)
            await session.flush()
            return row.id

        event_id = await self._run("create_event", op)
        log.info("SQL: Event created with id %s", event_id)
        return event_id

    async def update_event(
        self, owner_id: str, event_id: str, fields: Mapping[str, Any]
    ) -> CalendarEvent:
        changes = check_update_fields(fields)
        log.info("SQL: Updating event %s for owner %s: %s", event_id, owner_id, sorted(changes))

        async def op(session: AsyncSession) -> CalendarEvent:
            row = await self._owned_event(session, owner_id, event_id)
            for key, value in changes.items():
                setattr(row, key, _plain(value))
            row.updated_at = self._clock()
            await session.flush()
            return CalendarEvent.model_validate(row)

        return await self._run("update_event", op)

    async def delete_event(self, owner_id: str, event_id: str) -> None:
        log.info("SQL: Deleting event %s for owner %s", event_id, owner_id)

        async def op(session: AsyncSession) -> None:
            row = await self._owned_event(session, owner_id, event_id)
            await session.delete(row)

        await self._run("delete_event", op)

    # ------------------------------------------------------------------ #
    #                           Subscriptions                            #
    # ------------------------------------------------------------------ #

    async def create_subscription(
        self, owner_id: str, name: Optional[str] = None
    ) -> CalendarSubscription:
        log.info("SQL: Creating subscription token for owner %s", owner_id)

        async def op(session: AsyncSession) -> CalendarSubscription:
            row = CalendarSubscriptionORM(
                owner_id=owner_id,
                token=generate_subscription_token(owner_id),
                name=name,
                created_at=self._clock(),
            )
            session.add(row)
            await session.flush()
            return CalendarSubscription.model_validate(row)

        return await self._run("create_subscription", op)

    async def list_subscriptions(self, owner_id: str) -> List[CalendarSubscription]:
        async def op(session: AsyncSession) -> List[CalendarSubscription]:
            stmt = (
                select(CalendarSubscriptionORM)
                .where(CalendarSubscriptionORM.owner_id == owner_id)
                .order_by(CalendarSubscriptionORM.created_at)
            )
            rows = (await session.scalars(stmt)).all()
            return [CalendarSubscription.model_validate(row) for row in rows]

        return await self._run("list_subscriptions", op)

    async def delete_subscription(self, owner_id: str, subscription_id: str) -> None:
        log.info("SQL: Deleting subscription %s for owner %s", subscription_id, owner_id)

        async def op(session: AsyncSession) -> None:
            stmt = delete(CalendarSubscriptionORM).where(
                CalendarSubscriptionORM.id == subscription_id,
                CalendarSubscriptionORM.owner_id == owner_id,
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError("subscription", subscription_id, owner_id)

        await self._run("delete_subscription", op)

    async def get_subscription_by_token(self, token: str) -> CalendarSubscription:
        async def op(session: AsyncSession) -> CalendarSubscription:
            stmt = select(CalendarSubscriptionORM).where(CalendarSubscriptionORM.token == token)
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                raise NotFoundError("subscription", token[:8] + "...")
            return CalendarSubscription.model_validate(row)

        return await self._run("get_subscription_by_token", op)


__all__ = ["SqlEventStore"]
