from datetime import datetime

from icalendar import Calendar

from socialdash.core.calendar import CalendarEvent, EventSource
from socialdash.core.calendar.ics import build_ics_feed

STAMP = datetime(2025, 6, 1, 12, 0)


def _event(event_id: str, **fields) -> CalendarEvent:
    data = dict(
        id=event_id,
        owner_id="u1",
        title="Launch",
        start_date=datetime(2025, 6, 15, 10, 0),
        created_at=datetime(2025, 6, 1, 9, 0),
        updated_at=datetime(2025, 6, 2, 9, 0),
    )
    data.update(fields)
    return CalendarEvent(**data)


def _feed(*events: CalendarEvent) -> bytes:
    return build_ics_feed(events, product_id="-//Test//Feed//EN", stamp=STAMP)


def test_empty_feed_is_a_valid_calendar():
    body = _feed()
    cal = Calendar.from_ical(body)
    assert cal.get("prodid") == "-//Test//Feed//EN"
    assert cal.get("x-wr-calname") == "Content Calendar"
    assert b"BEGIN:VEVENT" not in body


def test_all_day_ai_event():
    body = _feed(_event("abc", all_day=True, source=EventSource.AI, start_date=datetime(2025, 6, 15)))
    assert b"UID:abc@socialdash" in body
    assert b"DTSTART;VALUE=DATE:20250615" in body
    assert b"DURATION:P1D" in body
    assert b"CATEGORIES:AI Generated" in body
    assert b"STATUS:CONFIRMED" in body


def test_timed_event_defaults_to_one_hour():
    body = _feed(_event("t1"))
    assert b"DTSTART:20250615T100000" in body
    assert b"DTEND:20250615T110000" in body
    assert b"CATEGORIES:Manual" in body


def test_explicit_end_and_bad_end():
    body = _feed(
        _event("ok", end_date=datetime(2025, 6, 15, 12, 30)),
        _event("bad", title="Backwards", start_date=datetime(2025, 6, 16, 10, 0), end_date=datetime(2025, 6, 16, 9, 0)),
    )
    assert b"DTEND:20250615T123000" in body
    assert b"DTEND:20250616T110000" in body


def test_every_event_becomes_a_vevent():
    cal = Calendar.from_ical(_feed(_event("a", title="One"), _event("b", title="Two", description="Notes")))
    summaries = sorted(str(component.get("summary")) for component in cal.walk("VEVENT"))
    assert summaries == ["One", "Two"]
