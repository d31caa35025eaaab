# socialdash/core/calendar/tokens.py

from __future__ import annotations

import hashlib
import re
import secrets
import time

_TOKEN_RE = re.compile(r"[a-f0-9]{64}")


def generate_subscription_token(owner_id: str) -> str:
    """
    Токен подписки: sha256 от ``owner_id:timestamp_ms:<32 случайных байта hex>``.
    64 hex-символа, срока действия нет.
    """
    raw = f"{owner_id}:{int(time.time() * 1000)}:{secrets.token_hex(32)}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def is_valid_subscription_token(token: str) -> bool:
    """Проверяет только формат токена, не его наличие в хранилище."""
    return bool(_TOKEN_RE.fullmatch(token))


__all__ = ["generate_subscription_token", "is_valid_subscription_token"]
