# socialdash/core/calendar/ics.py

"""iCalendar export of an owner's events (subscription feed)."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

from icalendar import Calendar, Event

from .schemas import CalendarEvent, EventSource

log = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)


def _to_vevent(event: CalendarEvent, stamp: datetime) -> Event:
    vevent = Event()
    vevent.add("uid", f"{event.id}@socialdash")
    vevent.add("summary", event.title or "Untitled Event")
    if event.description:
        vevent.add("description", event.description)

    if event.all_day:
        # DTSTART;VALUE=DATE + длительность в сутки
        vevent.add("dtstart", event.start_date.date())
        vevent.add("duration", timedelta(days=1))
    else:
        end = event.end_date or event.start_date + DEFAULT_DURATION
        if end <= event.start_date:
            log.warning("ICS export: end is not after start for event %s, using 1h duration", event.id)
            end = event.start_date + DEFAULT_DURATION
        vevent.add("dtstart", event.start_date)
        vevent.add("dtend", end)

    vevent.add("dtstamp", stamp)
    vevent.add("created", event.created_at)
    vevent.add("last-modified", event.updated_at)
    vevent.add("categories", ["AI Generated" if event.source == EventSource.AI else "Manual"])
    vevent.add("status", "CONFIRMED")
    return vevent


def build_ics_feed(
    events: Iterable[CalendarEvent],
    *,
    product_id: str,
    calendar_name: str = "Content Calendar",
    stamp: datetime | None = None,
) -> bytes:
    """
    Собирает VCALENDAR из событий. Пустой список даёт валидный пустой календарь.
    Событие, которое не удалось сконвертировать, пропускается с записью в лог.
    """
    stamp = stamp or datetime.now()
    cal = Calendar()
    cal.add("prodid", product_id)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", calendar_name)

    exported = 0
    for event in events:
        try:
            cal.add_component(_to_vevent(event, stamp))
            exported += 1
        except (TypeError, ValueError):
            log.exception("ICS export: skipping event %s", event.id)
    log.debug("ICS export: %d events written", exported)
    return cal.to_ical()


__all__ = ["build_ics_feed"]
