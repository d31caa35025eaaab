# socialdash/core/auth/security.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from pydantic import ValidationError

from socialdash.config import settings

from .schemas import TokenData

log = logging.getLogger(__name__)

# Логин (OAuth) живёт во внешнем сервисе, tokenUrl здесь формальность.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/token")

# --- Функции для работы с JWT ---

def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Создает JWT токен доступа.

    Args:
        data (dict): Данные для payload. Ключ 'user_id' переносится в 'sub'.
        expires_delta (timedelta | None, optional): Время жизни токена.
                                                     Если None, берется из настроек.

    Returns:
        str: Сгенерированный JWT токен.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    if "user_id" in to_encode:
        to_encode["sub"] = str(to_encode.pop("user_id"))
    elif "sub" not in to_encode:
        raise ValueError("Missing 'user_id' or 'sub' in data for JWT")

    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    log.debug("Created JWT token for sub: %s", to_encode.get("sub"))
    return encoded_jwt


def verify_token(token: str, credentials_exception: HTTPException) -> TokenData:
    """
    Верифицирует JWT токен и возвращает данные из него.

    Raises:
        HTTPException: Если токен невалиден, истек или без 'sub'.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
        user_id: str | None = payload.get("sub")
        if not user_id:
            log.warning("Token verification failed: 'sub' (user_id) claim missing.")
            raise credentials_exception
        token_data = TokenData(user_id=user_id)
    except JWTError as e:
        log.warning("Token verification failed: JWTError - %s", e)
        raise credentials_exception from e
    except ValidationError as e:
        log.warning("Token verification failed: ValidationError - %s", e)
        raise credentials_exception from e

    log.debug("Token verified successfully for user_id: %s", user_id)
    return token_data


# --- FastAPI Dependency: владелец календаря из токена ---

async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """
    FastAPI зависимость: ID текущего пользователя (владельца событий).

    Raises:
        HTTPException: 401, если аутентификация не удалась.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    return verify_token(token, credentials_exception).user_id
