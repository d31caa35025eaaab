# socialdash/core/auth/schemas.py

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenData(BaseModel):
    """
    Данные внутри JWT токена.
    'sub' из payload: идентификатор пользователя (владельца календаря).
    """
    user_id: str = Field(..., min_length=1, description="User ID within our application")
