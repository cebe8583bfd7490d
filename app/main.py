# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.datastructures import Headers

# Конфигурация и ядро
from app.core import config
from app.core.cache import build_cache_store
from app.core.config import Settings
from app.core.errors import (
    ApiError,
    api_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from app.core.logging_config import setup_logging
from app.core.state import AppState
from app.db.session import build_engine, build_session_factory, init_db
from app.services.auth import MockSessionStore

# Роутеры FastAPI
from app.routers import auth, health
from app.routers.v1.api import api_router

# --- Инициализация ---
logger = logging.getLogger(__name__)


# --- CORS ---
class NoContentCORSMiddleware(CORSMiddleware):
    """
    Стандартный CORS из Starlette, но успешный pre-flight
    отвечает 204 без тела (админка ждет именно его).
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


def _cors_origins(settings: Settings) -> list[str]:
    origin = (settings.CORS_ALLOW_ORIGIN or "").strip()
    return [origin or "*"]


# --- Фабрика приложения ---
def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Собирает приложение: проверяет конфигурацию, создает движок БД,
    кеш и хранилище mock-сессий. Ошибочная конфигурация -> ConfigError.
    """
    settings = settings or config.settings
    settings.ensure_valid()

    engine = build_engine(settings)
    state = AppState(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        cache=build_cache_store(settings),
        sessions=MockSessionStore(ttl_seconds=settings.AUTH_SESSION_TTL_SECONDS),
    )

    # --- Lifespan Manager (запуск и остановка приложения) ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL)
        init_db(state.engine)
        logger.info(
            f"Merchant ops hub started (env={settings.APP_ENV}, "
            f"db={settings.database_driver}, cache={settings.CACHE_MODE})."
        )

        yield

        logger.info("Merchant ops hub shutting down...")
        await state.cache.close()
        state.engine.dispose()
        logger.info("Cache closed, database engine disposed.")

    app = FastAPI(
        title="Merchant Ops Hub",
        description="Backend for the merchant operations admin dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.ctx = state

    app.add_middleware(
        NoContentCORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # --- Регистрация обработчиков исключений ---
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --- Подключение роутеров FastAPI ---
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(api_router)

    return app


app = create_app()
