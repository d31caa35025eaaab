import asyncio
from datetime import date

import pytest
from celery import states
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from socialdash.core.calendar.memory import InMemoryEventStore
from socialdash.core.calendar.resilience import RetryPolicy
from socialdash.core.calendar.store import SqlEventStore
from socialdash.db.base import Base
from socialdash.workers.tasks import celery_app, schedule_from_message_task


@pytest.fixture(autouse=True)
def celery_eager():
    celery_app.conf.task_always_eager = True
    yield


@pytest.fixture
def store(monkeypatch) -> InMemoryEventStore:
    memory = InMemoryEventStore()
    monkeypatch.setattr("socialdash.workers.tasks.get_event_store", lambda: memory)
    return memory


def test_schedule_task_creates_event(store: InMemoryEventStore):
    result = schedule_from_message_task.delay("u1", "Publish the recap in 5 days", "2025-06-10")

    assert result.status == states.SUCCESS
    value = result.get()
    assert value["status"] == "ok"
    event_id = value["event_id"]
    assert event_id in {event.id for event in store._events["u1"].values()}


def test_schedule_task_without_date(store: InMemoryEventStore):
    value = schedule_from_message_task.delay("u1", "Let's talk about cats").get()
    assert value == {"status": "date_unresolved", "event_id": None}
    assert store._events == {}


# ---- SQL store: каждый запуск задачи в своём event loop ---- #

@pytest.fixture
def sql_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")

    async def create_tables() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(create_tables())
    return engine


def _sql_store(engine) -> SqlEventStore:
    factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    return SqlEventStore(factory, policy=RetryPolicy(backoff_seconds=0))


def test_schedule_task_runs_twice_against_sql_store(sql_engine, monkeypatch):
    monkeypatch.setattr("socialdash.workers.tasks.get_event_store", lambda: _sql_store(sql_engine))

    for message in ("Publish the recap tomorrow", "Publish the outtakes in 5 days"):
        value = schedule_from_message_task.delay("u1", message, "2025-06-10").get()
        assert value["status"] == "ok"
        # соединения не переживают event loop задачи
        assert sql_engine.pool.checkedin() == 0

    async def stored_dates() -> list:
        store = _sql_store(sql_engine)
        try:
            return [event.start_date.date() for event in await store.list_events("u1")]
        finally:
            await store.aclose()

    assert sorted(asyncio.run(stored_dates())) == [date(2025, 6, 11), date(2025, 6, 15)]
