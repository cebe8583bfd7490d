# app/services/order.py

import logging
import time

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.core.errors import ApiError
from app.crud import member as crud_member
from app.crud import order as crud_order
from app.db.session import is_unique_violation, run_in_session
from app.models.enums import OrderStatus
from app.models.order import Order as OrderModel
from app.schemas.order import Order, OrderCreate
from app.services.reports import invalidate_summary_cache
from app.utils.params import parse_enum
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

ORDER_STATUS_ERROR = "status must be pending, paid or refunded"


def generate_order_no(member_id: int) -> str:
    return f"ORD-{member_id}-{time.time_ns()}"


def to_order_schema(order: OrderModel, member_name: str) -> Order:
    return Order(
        id=order.id,
        order_no=order.order_no,
        member_id=order.member_id,
        member_name=member_name,
        amount_cents=order.amount_cents,
        status=order.status,
        source=order.source,
        paid_at=order.paid_at,
        created_at=order.created_at,
    )


def _create_order_for_member(db: Session, member_id: int, **fields):
    """Проверка участника и вставка в одной транзакции/потоке."""
    member = crud_member.get_member_by_id(db, member_id)
    if member is None:
        return None, None
    return member, crud_order.create_order(db, member_id=member_id, **fields)


async def create_order(db: Session, cache: CacheStore, payload: OrderCreate) -> Order:
    source = payload.source.strip()
    order_no = payload.order_no.strip()

    if payload.member_id <= 0 or payload.amount_cents <= 0 or not source:
        raise ApiError(400, "memberId, amountCents and source are required")
    status = parse_enum(OrderStatus, payload.status, ORDER_STATUS_ERROR) or OrderStatus.PAID
    if not order_no:
        order_no = generate_order_no(payload.member_id)

    # Переход в "paid" фиксирует время оплаты, других переходов нет
    paid_at = utcnow() if status == OrderStatus.PAID else None

    try:
        member, db_order = await run_in_session(
            db,
            _create_order_for_member,
            payload.member_id,
            order_no=order_no,
            amount_cents=payload.amount_cents,
            status=status,
            source=source,
            paid_at=paid_at,
        )
    except IntegrityError as e:
        if is_unique_violation(e):
            raise ApiError(400, "orderNo already exists")
        logger.error("Failed to create order.", exc_info=True)
        raise ApiError(500, "create order failed")
    except SQLAlchemyError:
        logger.error("Failed to create order.", exc_info=True)
        raise ApiError(500, "create order failed")

    if member is None:
        raise ApiError(400, "member not found")

    logger.info(f"Order {db_order.order_no} created for member {member.id} (status={status.value}).")
    await invalidate_summary_cache(cache)
    return to_order_schema(db_order, member.name)


async def list_orders(
    db: Session,
    limit: int,
    member_id: int | None = None,
    status: OrderStatus | None = None,
) -> list[Order]:
    try:
        orders = await run_in_session(db, crud_order.get_orders, limit=limit, member_id=member_id, status=status)
    except SQLAlchemyError:
        logger.error("Failed to list orders.", exc_info=True)
        raise ApiError(500, "list orders failed")
    return [to_order_schema(o, o.member.name if o.member else "") for o in orders]
