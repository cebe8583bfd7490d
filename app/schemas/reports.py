# app/schemas/reports.py

from typing import List

from app.models.enums import CampaignStatus
from app.schemas.common import CamelModel, UtcDatetime


class ChannelBreakdown(CamelModel):
    channel: str
    member_count: int


class Summary(CamelModel):
    """Сводка для главного экрана. Кешируется целиком."""
    member_count: int
    order_count: int
    paid_order_count: int
    revenue_cents: int
    repurchase_count: int
    repurchase_rate: float
    active_campaign_count: int
    channel_breakdown: List[ChannelBreakdown]


class FollowupMember(CamelModel):
    member_id: int
    member_name: str
    phone: str
    channel: str
    paid_order_count: int
    paid_amount_cents: int
    last_paid_at: UtcDatetime | None = None
    days_since_last_pay: int


class FollowupList(CamelModel):
    days_window: int
    items: List[FollowupMember]


class CampaignAttributionRow(CamelModel):
    campaign_id: int
    campaign_name: str
    channel: str
    status: CampaignStatus
    start_at: UtcDatetime | None = None
    end_at: UtcDatetime | None = None
    target_member_count: int
    paid_order_count: int
    converted_member_count: int
    repurchase_converted_count: int
    revenue_cents: int
    conversion_rate: float


class CampaignAttribution(CamelModel):
    rows: List[CampaignAttributionRow]
