# app/models/order.py

from sqlalchemy import BigInteger, Column, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.utils.timeutils import utcnow
from app.models.enums import OrderStatus, enum_values


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_no = Column(String(40), unique=True, index=True, nullable=False)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)

    # Сумма в копейках/центах, всегда > 0
    amount_cents = Column(BigInteger, nullable=False)
    status = Column(
        Enum(OrderStatus, native_enum=False, length=20, values_callable=enum_values, validate_strings=True),
        nullable=False,
        index=True,
    )
    source = Column(String(30), nullable=False)  # Канал, из которого пришел заказ
    paid_at = Column(DateTime(timezone=True), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    member = relationship("Member", back_populates="orders")
