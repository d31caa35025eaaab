# socialdash/core/extractor/extract.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from .dates import resolve_date
from .text import resolve_description, resolve_title

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedEvent:
    """Результат разбора сообщения: дата, заголовок, описание и сработавшее правило."""

    date: date
    title: str
    description: str
    rule: str

    @property
    def start_date(self) -> datetime:
        # all-day событие начинается в полночь
        return datetime.combine(self.date, time.min)


def extract_event(message: str, reference: date | datetime | None = None) -> ExtractedEvent | None:
    """
    Разбирает сообщение ассистента в событие календаря.

    Чистая функция: без I/O, детерминирована при одинаковых message и reference.

    Returns:
        ExtractedEvent | None: None, если дату найти не удалось.
    """
    match = resolve_date(message, reference)
    if match is None:
        log.info("No date found in message: '%.50s...'", message)
        return None

    title = resolve_title(message, match.value)
    description = resolve_description(message, title)
    return ExtractedEvent(date=match.value, title=title, description=description, rule=match.rule)


__all__ = ["ExtractedEvent", "extract_event"]
