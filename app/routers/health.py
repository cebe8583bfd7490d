# app/routers/health.py

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.core.state import AppState
from app.db.session import ping_db
from app.dependencies import get_app_state
from app.schemas.common import HealthStatus

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/healthz")
async def healthz(state: AppState = Depends(get_app_state)):
    """Проверяет БД (SELECT 1) и кеш. При сбое отвечает настоящим HTTP 500."""
    try:
        await run_in_threadpool(ping_db, state.engine)
    except Exception as e:
        logger.error(f"Health check: database is unavailable: {e}")
        return JSONResponse(status_code=500, content=HealthStatus(ok=False, error=f"db: {e}").public())

    try:
        await state.cache.ping()
    except Exception as e:
        logger.error(f"Health check: cache is unavailable: {e}")
        return JSONResponse(status_code=500, content=HealthStatus(ok=False, error=f"cache: {e}").public())

    status = HealthStatus(
        ok=True,
        env=state.settings.APP_ENV,
        db=state.settings.database_driver,
        cache=state.settings.CACHE_MODE,
    )
    return JSONResponse(status_code=200, content=status.public())
