# socialdash/core/calendar/models.py

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from socialdash.db.base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class CalendarEventORM(Base):
    """
    ORM модель события контент-календаря.

    Все даты хранятся «наивными» (без таймзоны), как их присылает клиент.
    Каждое событие принадлежит ровно одному владельцу (owner_id).
    """
    __tablename__ = "calendar_events"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True, comment="Owning user ID")
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    all_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    # 'manual' | 'ai'
    source: Mapped[str] = mapped_column(String(16), nullable=False, default="manual")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_calendar_events_owner_start", "owner_id", "start_date"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<CalendarEvent id={self.id} owner={self.owner_id!r} "
            f"start='{self.start_date:%Y-%m-%d}' source={self.source}>"
        )


class CalendarSubscriptionORM(Base):
    """Токен подписки на ICS-фид владельца. Без срока действия."""
    __tablename__ = "calendar_subscriptions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CalendarSubscription id={self.id} owner={self.owner_id!r} name={self.name!r}>"


__all__ = ["CalendarEventORM", "CalendarSubscriptionORM"]
