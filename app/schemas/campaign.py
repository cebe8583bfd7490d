# app/schemas/campaign.py

from pydantic import Field

from app.models.enums import CampaignStatus
from app.schemas.common import CamelModel, UtcDatetime


class CampaignCreate(CamelModel):
    name: str = ""
    channel: str = ""
    # NaN и бесконечности отсекаются на входе
    discount_pct: float = Field(0, allow_inf_nan=False)
    status: str = ""  # По умолчанию "active"
    # Даты приходят строками и разбираются строго как RFC 3339
    start_at: str = ""
    end_at: str = ""


class Campaign(CamelModel):
    id: int
    name: str
    channel: str
    discount_pct: float
    status: CampaignStatus
    start_at: UtcDatetime | None = None
    end_at: UtcDatetime | None = None
    created_at: UtcDatetime
