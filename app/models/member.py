# app/models/member.py

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.utils.timeutils import utcnow


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(80), nullable=False)
    phone = Column(String(20), unique=True, index=True, nullable=False)
    channel = Column(String(30), nullable=False, index=True)  # Источник привлечения

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    # Удаление участника удаляет и его заказы
    orders = relationship("Order", back_populates="member", cascade="all, delete-orphan", passive_deletes=True)
