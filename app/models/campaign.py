# app/models/campaign.py

from sqlalchemy import Column, DateTime, Enum, Float, Integer, String, func

from app.db.session import Base
from app.utils.timeutils import utcnow
from app.models.enums import CampaignStatus, enum_values


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    channel = Column(String(30), nullable=False, index=True)
    discount_pct = Column(Float, nullable=False)  # (0, 100]
    status = Column(
        Enum(CampaignStatus, native_enum=False, length=20, values_callable=enum_values, validate_strings=True),
        nullable=False,
        index=True,
    )

    # Окно атрибуции; любая из границ может отсутствовать
    start_at = Column(DateTime(timezone=True), nullable=True)
    end_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)
