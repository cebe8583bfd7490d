# app/crud/order.py

from datetime import datetime

from sqlalchemy.orm import Session, joinedload

from app.models.enums import OrderStatus
from app.models.order import Order


def create_order(
    db: Session,
    order_no: str,
    member_id: int,
    amount_cents: int,
    status: OrderStatus,
    source: str,
    paid_at: datetime | None = None,
) -> Order:
    """
    Создает заказ. Дубликат order_no -> IntegrityError при flush.
    Требует внешнего вызова db.commit().
    """
    db_order = Order(
        order_no=order_no,
        member_id=member_id,
        amount_cents=amount_cents,
        status=status,
        source=source,
        paid_at=paid_at,
    )
    db.add(db_order)
    db.flush()
    db.refresh(db_order)
    return db_order


def get_orders(
    db: Session,
    limit: int = 20,
    member_id: int | None = None,
    status: OrderStatus | None = None,
) -> list[Order]:
    """Последние заказы вместе с участником (для member_name в ответе)."""
    query = db.query(Order).options(joinedload(Order.member))
    if member_id:
        query = query.filter(Order.member_id == member_id)
    if status is not None:
        query = query.filter(Order.status == status)
    return query.order_by(Order.id.desc()).limit(limit).all()
