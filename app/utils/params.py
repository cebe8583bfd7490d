# app/utils/params.py
#
# Разбор query-параметров так, как их шлет фронтенд админки:
# мусор -> значение по умолчанию, выход за границы -> ближайшая граница.

from enum import Enum
from typing import Type, TypeVar

from app.core.errors import ApiError

E = TypeVar("E", bound=Enum)

MAX_LIMIT = 100
MAX_DB_ID = 2**63 - 1


def clamp_int(raw: str | None, fallback: int, minimum: int, maximum: int) -> int:
    raw = (raw or "").strip()
    if not raw:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return max(minimum, min(maximum, value))


def parse_limit(raw: str | None, fallback: int = 20) -> int:
    return clamp_int(raw, fallback, 1, MAX_LIMIT)


def parse_days(raw: str | None, fallback: int = 30) -> int:
    return clamp_int(raw, fallback, 1, 365)


def parse_positive_id(raw: str | None) -> int | None:
    """ID-фильтр: все, что не положительное целое в пределах BIGINT, означает "без фильтра"."""
    raw = (raw or "").strip()
    if not raw.isdigit():
        return None
    value = int(raw)
    return value if 0 < value <= MAX_DB_ID else None


def parse_enum(enum_cls: Type[E], raw: str | None, error_message: str) -> E | None:
    """Пустое значение -> None, неизвестное значение -> ошибка 400."""
    raw = (raw or "").strip().lower()
    if not raw:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        raise ApiError(400, error_message)
