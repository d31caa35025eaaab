# socialdash/core/extractor/__init__.py

"""
Extractor package: free-form AI chat message → calendar event.

Экспортируем основные элементы, чтобы внешние модули могли писать
`from socialdash.core.extractor import EventScheduler`.
"""

from .dates import DATE_RULES, DateMatch, DateRule, resolve_date
from .extract import ExtractedEvent, extract_event
from .phrases import contains_scheduling_phrase
from .service import EventScheduler, ScheduleResult
from .text import resolve_description, resolve_title

__all__ = [
    "DATE_RULES",
    "DateMatch",
    "DateRule",
    "resolve_date",
    "resolve_title",
    "resolve_description",
    "ExtractedEvent",
    "extract_event",
    "contains_scheduling_phrase",
    "EventScheduler",
    "ScheduleResult",
]
