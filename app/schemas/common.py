# app/schemas/common.py

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, List, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def ensure_utc(value: datetime | None) -> datetime | None:
    """SQLite возвращает "наивные" даты; все даты в БД хранятся в UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    """Базовая схема: поля в JSON в camelCase, как ждет фронтенд админки."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Единый конверт ответа. code == 200 означает успех."""
    code: int = 200
    msg: str = "ok"
    data: T


class PaginatedData(CamelModel, Generic[T]):
    records: List[T]
    current: int
    size: int
    total: int


class HealthStatus(BaseModel):
    ok: bool
    env: str | None = None
    db: str | None = None
    cache: str | None = None
    error: str | None = None

    def public(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
