"""
Calendar subsystem package.

• ``CalendarEvent`` / ``CalendarSubscription`` – Pydantic-модели (см. schemas.py).
• ``BaseEventStore`` – абстрактный интерфейс хранилища, ошибки ``StorageError``
  и ``NotFoundError`` (см. base.py).
• ``get_event_store()`` – фабрика, возвращающая хранилище по имени или из
  ``settings.EVENT_STORE``.

Ленивая загрузка (``importlib.import_module``) не тянет SQLAlchemy-движок,
пока реально не нужно SQL-хранилище.
"""
from __future__ import annotations

import importlib
from functools import lru_cache
from typing import Callable, Dict

from socialdash.config import settings
from .base import BaseEventStore, CalendarStoreError, NotFoundError, StorageError
from .schemas import CalendarEvent, CalendarSubscription, EventCreate, EventSource, EventUpdate


# --------------------------------------------------------------------------- #
#                       builders: name → store instance                       #
# --------------------------------------------------------------------------- #
def _build_sql_store() -> BaseEventStore:
    store_mod = importlib.import_module(f"{__name__}.store")
    db_mod = importlib.import_module("socialdash.db.base")
    return store_mod.SqlEventStore(db_mod.async_session_factory)


def _build_memory_store() -> BaseEventStore:
    memory_mod = importlib.import_module(f"{__name__}.memory")
    return memory_mod.InMemoryEventStore()


_STORE_BUILDERS: Dict[str, Callable[[], BaseEventStore]] = {
    "sql": _build_sql_store,
    "memory": _build_memory_store,
}


# --------------------------------------------------------------------------- #
#                                 public API                                  #
# --------------------------------------------------------------------------- #
@lru_cache(maxsize=None)
def _cached_store(store_key: str) -> BaseEventStore:
    try:
        builder = _STORE_BUILDERS[store_key]
    except KeyError as exc:
        raise ValueError(f"Unknown event store: {store_key}") from exc
    return builder()


def get_event_store(name: str | None = None) -> BaseEventStore:
    """
    Вернуть (закэшированный) экземпляр хранилища событий.

    • ``name`` – явное имя (case-insensitive).
    • Если не передано, берём из ``settings.EVENT_STORE``.
    """
    return _cached_store((name or settings.EVENT_STORE).lower())


__all__: list[str] = [
    "BaseEventStore",
    "CalendarStoreError",
    "StorageError",
    "NotFoundError",
    "CalendarEvent",
    "CalendarSubscription",
    "EventCreate",
    "EventUpdate",
    "EventSource",
    "get_event_store",
]
