# app/dependencies.py

import logging
from typing import Iterator

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.core.errors import ApiError
from app.core.state import AppState
from app.schemas.auth import SessionUser
from app.services.auth import MockSessionStore, parse_auth_token

# --- Инициализация логгера ---
logger = logging.getLogger(__name__)


def get_app_state(request: Request) -> AppState:
    return request.app.state.ctx


# --- Управление сессией БД ---
def get_db(state: AppState = Depends(get_app_state)) -> Iterator[Session]:
    """
    Основная зависимость FastAPI для получения сессии БД.
    Это генератор, который корректно работает с `Depends`.
    """
    db = state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_cache(state: AppState = Depends(get_app_state)) -> CacheStore:
    return state.cache


def get_session_store(state: AppState = Depends(get_app_state)) -> MockSessionStore:
    return state.sessions


# --- Зависимости mock-авторизации ---

def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return parse_auth_token(authorization)


def get_current_session_user(
    token: str = Depends(get_bearer_token),
    sessions: MockSessionStore = Depends(get_session_store),
) -> SessionUser:
    """
    ОБЯЗАТЕЛЬНАЯ зависимость.
    Нет токена, токен неизвестен или истек -> конверт с кодом 401.
    """
    if not token:
        raise ApiError(401, "unauthorized")
    user = sessions.get(token)
    if user is None:
        logger.info("Rejected request with unknown or expired token.")
        raise ApiError(401, "unauthorized")
    return user
