# app/routers/v1/endpoints/orders.py

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.dependencies import get_cache, get_db
from app.models.enums import OrderStatus
from app.schemas.common import ApiResponse
from app.schemas.order import Order, OrderCreate
from app.services import order as order_service
from app.utils.params import parse_enum, parse_limit, parse_positive_id

router = APIRouter()


@router.post("/orders", response_model=ApiResponse[Order])
async def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    cache: CacheStore = Depends(get_cache),
):
    """
    Создает заказ для существующего участника.
    Статус по умолчанию "paid"; номер заказа генерируется, если не передан.
    """
    order = await order_service.create_order(db, cache, payload)
    return ApiResponse(data=order)


@router.get("/orders", response_model=ApiResponse[List[Order]])
async def list_orders(
    member_id: str | None = Query(None, alias="memberId"),
    status: str | None = Query(None, description="pending, paid или refunded"),
    limit: str | None = Query(None, description="1..100, по умолчанию 20"),
    db: Session = Depends(get_db),
):
    orders = await order_service.list_orders(
        db,
        limit=parse_limit(limit),
        member_id=parse_positive_id(member_id),
        status=parse_enum(OrderStatus, status, order_service.ORDER_STATUS_ERROR),
    )
    return ApiResponse(data=orders)
