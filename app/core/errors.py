# app/core/errors.py

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Бизнес-ошибка. Отдается с HTTP 200, а код (400/401/500)
    кладется внутрь конверта {code, msg, data}.
    """

    def __init__(self, code: int, msg: str):
        super().__init__(msg)
        self.code = code
        self.msg = msg


def envelope_error(code: int, msg: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "msg": msg, "data": {}})


async def api_error_handler(request: Request, exc: ApiError):
    if exc.code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.msg}")
    return envelope_error(exc.code, exc.msg)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Ошибки разбора тела запроса -> конверт с кодом 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        msg = f"invalid payload: {location} {first.get('msg', '')}".strip()
    else:
        msg = "invalid payload"
    return envelope_error(400, msg)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Глобальный обработчик для всех необработанных исключений.
    Детали наружу не отдаются, только в лог.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=exc)
    return envelope_error(500, "internal server error")
