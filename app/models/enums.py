# app/models/enums.py

import enum


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


def enum_values(enum_cls) -> list[str]:
    """В БД храним значения ("paid"), а не имена членов ("PAID")."""
    return [member.value for member in enum_cls]
