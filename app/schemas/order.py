# app/schemas/order.py

from pydantic import Field

from app.models.enums import OrderStatus
from app.schemas.common import CamelModel, UtcDatetime

MAX_DB_INT = 2**63 - 1


class OrderCreate(CamelModel):
    order_no: str = ""  # Если не передан, генерируется сервисом
    # Верхняя граница: целое должно поместиться в BIGINT
    member_id: int = Field(0, le=MAX_DB_INT)
    amount_cents: int = Field(0, le=MAX_DB_INT)
    status: str = ""  # По умолчанию "paid"
    source: str = ""


class Order(CamelModel):
    id: int
    order_no: str
    member_id: int
    member_name: str
    amount_cents: int
    status: OrderStatus
    source: str
    paid_at: UtcDatetime | None = None
    created_at: UtcDatetime
