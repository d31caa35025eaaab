# socialdash/core/calendar/base.py
"""
Abstract base and error types for calendar event stores.
All store methods are asynchronous.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from .schemas import CalendarEvent, CalendarSubscription, EventCreate, EventUpdate


class CalendarStoreError(Exception):
    """Базовая ошибка хранилища календаря."""


class StorageError(CalendarStoreError):
    """Нижележащее хранилище не смогло выполнить операцию (связь, таймаут, БД)."""


class NotFoundError(CalendarStoreError):
    """Событие / подписка не найдены для данного владельца."""

    def __init__(self, kind: str, object_id: str, owner_id: str | None = None) -> None:
        self.kind = kind
        self.object_id = object_id
        self.owner_id = owner_id
        super().__init__(f"{kind} {object_id!r} not found")


# Поля, которые нельзя менять через update_event
IMMUTABLE_EVENT_FIELDS = frozenset({"id", "owner_id", "created_at", "updated_at"})
# Поля, которые нельзя обнулить
REQUIRED_EVENT_FIELDS = frozenset({"title", "description", "start_date", "all_day", "source"})


class BaseEventStore(ABC):
    """
    Абстрактный интерфейс хранилища событий (АСИНХРОННЫЙ).

    Каждое событие принадлежит одному владельцу; чтение, изменение и удаление
    всегда выполняются в рамках owner_id.
    """

    # Имя реализации ('sql', 'memory')
    name: str

    async def aclose(self) -> None:
        """Освобождает соединения хранилища. По умолчанию ничего не делает."""
        return None

    # ------------------------------------------------------------------ #
    #                              Events                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    async def list_events(self, owner_id: str) -> List[CalendarEvent]:
        """
        Возвращает все события владельца (пустой список, если их нет).

        Args:
            owner_id (str): ID владельца.

        Returns:
            List[CalendarEvent]: События, отсортированные по start_date.
        """
        ...

    @abstractmethod
    async def get_event(self, owner_id: str, event_id: str) -> CalendarEvent:
        """
        Возвращает событие владельца.

        Raises:
            NotFoundError: Событие отсутствует или принадлежит другому владельцу.
        """
        ...

    @abstractmethod
    async def create_event(self, payload: EventCreate) -> str:
        """
        Сохраняет событие, проставляя created_at = updated_at = now.

        Args:
            payload (EventCreate): Данные события без id и отметок времени.

        Returns:
            str: Идентификатор нового события.

        Raises:
            StorageError: Если хранилище недоступно.
        """
        ...

    @abstractmethod
    async def update_event(
        self, owner_id: str, event_id: str, fields: Mapping[str, Any]
    ) -> CalendarEvent:
        """
        Частично обновляет событие владельца и обновляет updated_at.

        Raises:
            NotFoundError: Событие не найдено у этого владельца.
            ValueError: Попытка изменить неизменяемое поле.
        """
        ...

    @abstractmethod
    async def delete_event(self, owner_id: str, event_id: str) -> None:
        """
        Удаляет событие владельца.

        Raises:
            NotFoundError: Событие уже удалено или никогда не существовало.
        """
        ...

    # ------------------------------------------------------------------ #
    #                           Subscriptions                            #
    # ------------------------------------------------------------------ #

    @abstractmethod
    async def create_subscription(
        self, owner_id: str, name: Optional[str] = None
    ) -> CalendarSubscription:
        ...

    @abstractmethod
    async def list_subscriptions(self, owner_id: str) -> List[CalendarSubscription]:
        ...

    @abstractmethod
    async def delete_subscription(self, owner_id: str, subscription_id: str) -> None:
        ...

    @abstractmethod
    async def get_subscription_by_token(self, token: str) -> CalendarSubscription:
        """
        Находит подписку по токену (авторизация ICS-фида).

        Raises:
            NotFoundError: Токен неизвестен.
        """
        ...


def check_update_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Проверяет частичное обновление перед записью.

    Запрещает неизменяемые поля, null в обязательных полях и пустой title,
    затем прогоняет значения через EventUpdate: неизвестные ключи отклоняются,
    строки с датами приводятся к datetime.

    Raises:
        ValueError: Обновление недопустимо.
    """
    forbidden = IMMUTABLE_EVENT_FIELDS.intersection(fields)
    if forbidden:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(forbidden))}")
    nulled = sorted(key for key in REQUIRED_EVENT_FIELDS.intersection(fields) if fields[key] is None)
    if nulled:
        raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
    if "title" in fields and not fields["title"]:
        raise ValueError("title must not be empty")
    try:
        update = EventUpdate.model_validate(dict(fields))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ValueError(f"Invalid update: {problems}") from exc
    return update.model_dump(exclude_unset=True)


__all__ = [
    "BaseEventStore",
    "CalendarStoreError",
    "StorageError",
    "NotFoundError",
    "IMMUTABLE_EVENT_FIELDS",
    "REQUIRED_EVENT_FIELDS",
    "check_update_fields",
]
