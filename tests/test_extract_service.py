# tests/test_extract_service.py
from datetime import date, datetime

import pytest

from socialdash.core.calendar import EventSource
from socialdash.core.calendar.memory import InMemoryEventStore
from socialdash.core.extractor import EventScheduler, extract_event

REF = date(2025, 1, 20)


def test_extract_event_summer_trends():
    extracted = extract_event("Please schedule a video titled \"Summer Trends\" on June 15th", REF)
    assert extracted.date == date(2025, 6, 15)
    assert extracted.title == "Summer Trends"
    assert extracted.start_date == datetime(2025, 6, 15, 0, 0)


def test_extract_event_structured_labels_win():
    message = (
        "Here's the plan, starting tomorrow on June 1st.\n\n"
        "**Date:** July 10, 2025\n"
        "**Event Name:** Q3 Recap\n"
        "**Description:** Walk through the quarter's numbers."
    )
    extracted = extract_event(message, REF)
    assert extracted.date == date(2025, 7, 10)
    assert extracted.title == "Q3 Recap"
    assert extracted.description == "Walk through the quarter's numbers."


def test_extract_event_without_date_is_none():
    assert extract_event("Let's talk about cats", REF) is None


@pytest.mark.asyncio
async def test_schedule_creates_all_day_ai_event(memory_store: InMemoryEventStore):
    scheduler = EventScheduler(memory_store)
    result = await scheduler.schedule("Post a video titled \"Lake Day\" tomorrow", "u1", REF)

    assert result.ok
    event = await memory_store.get_event("u1", result.event_id)
    assert event.title == "Lake Day"
    assert event.start_date == datetime(2025, 1, 21)
    assert event.all_day is True
    assert event.source == EventSource.AI
    assert event.owner_id == "u1"
    assert event.created_at == event.updated_at


@pytest.mark.asyncio
async def test_unresolved_date_creates_nothing(memory_store: InMemoryEventStore):
    scheduler = EventScheduler(memory_store)
    event_id = await scheduler.extract_and_schedule_event("Let's talk about cats", "u1", REF)

    assert event_id is None
    assert await memory_store.list_events("u1") == []
    result = await scheduler.schedule("Let's talk about cats", "u1", REF)
    assert result.status == "date_unresolved"


@pytest.mark.asyncio
async def test_same_message_twice_gives_two_identical_events(memory_store: InMemoryEventStore):
    scheduler = EventScheduler(memory_store)
    message = "**Date:** March 3, 2025\n**Title:** Spring Drop\n\nTeaser clips.\n\nFull reveal."
    first = await scheduler.extract_and_schedule_event(message, "u1", REF)
    second = await scheduler.extract_and_schedule_event(message, "u1", REF)

    assert first and second and first != second
    a = await memory_store.get_event("u1", first)
    b = await memory_store.get_event("u1", second)
    assert (a.title, a.description, a.start_date) == (b.title, b.description, b.start_date)


@pytest.mark.asyncio
async def test_title_and_description_fallbacks(memory_store: InMemoryEventStore):
    message = "\n" + "We really need to post on 14th. " + "Then keep going " * 30
    event_id = await EventScheduler(memory_store).extract_and_schedule_event(message, "u1", REF)

    event = await memory_store.get_event("u1", event_id)
    assert event.title == "Content for 1/14/2025"
    assert event.description == message[:300]


@pytest.mark.asyncio
async def test_storage_failure_is_reported_not_raised(memory_store: InMemoryEventStore):
    memory_store.fail_writes = True
    scheduler = EventScheduler(memory_store)

    assert await scheduler.extract_and_schedule_event("Publish it tomorrow", "u1", REF) is None
    result = await scheduler.schedule("Publish it tomorrow", "u1", REF)
    assert result.status == "storage_error"
    assert result.extracted.date == date(2025, 1, 21)
    assert result.detail


@pytest.mark.asyncio
async def test_events_stay_with_their_owner(memory_store: InMemoryEventStore):
    scheduler = EventScheduler(memory_store)
    await scheduler.extract_and_schedule_event("Post the recap tomorrow", "alice", REF)
    await scheduler.extract_and_schedule_event("Post the outtakes in 5 days", "bob", REF)

    alice_events = await memory_store.list_events("alice")
    assert len(alice_events) == 1
    assert all(event.owner_id == "alice" for event in alice_events)
    assert [event.owner_id for event in await memory_store.list_events("bob")] == ["bob"]
