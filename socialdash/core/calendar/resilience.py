# socialdash/core/calendar/resilience.py

"""Timeout + bounded retry for store operations."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError

from socialdash.config import settings

from .base import StorageError

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 2
    timeout_seconds: float = 5.0
    backoff_seconds: float = 0.2


def policy_from_settings() -> RetryPolicy:
    return RetryPolicy(
        attempts=settings.STORE_RETRY_ATTEMPTS,
        timeout_seconds=settings.STORE_TIMEOUT_SECONDS,
    )


def is_transient_error(exc: BaseException) -> bool:
    """Ошибки связи и таймауты можно повторить; ошибки данных нельзя."""
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError, OperationalError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    name: str,
    policy: RetryPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Выполняет операцию хранилища под таймаутом с ограниченным числом попыток.

    ``operation`` вызывается заново на каждую попытку, поэтому должна
    открывать собственную сессию/транзакцию.

    Raises:
        StorageError: Попытки исчерпаны или ошибка не транзиентная.
    """
    attempts = max(1, policy.attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(operation(), timeout=policy.timeout_seconds)
        except (SQLAlchemyError, asyncio.TimeoutError, TimeoutError, ConnectionError) as exc:
            if attempt >= attempts or not is_transient_error(exc):
                log.error("Store operation '%s' failed after %d attempt(s): %r", name, attempt, exc)
                raise StorageError(f"{name} failed: {type(exc).__name__}") from exc
            log.warning(
                "Store operation '%s' attempt %d/%d failed (%r), retrying in %.2fs",
                name, attempt, attempts, exc, policy.backoff_seconds,
            )
            await sleep(policy.backoff_seconds)
    raise StorageError(f"{name} failed: retry attempts exhausted")  # pragma: no cover


__all__ = ["RetryPolicy", "policy_from_settings", "is_transient_error", "run_with_retry"]
