# app/crud/campaign.py

from datetime import datetime

from sqlalchemy.orm import Session

from app.models.campaign import Campaign
from app.models.enums import CampaignStatus


def create_campaign(
    db: Session,
    name: str,
    channel: str,
    discount_pct: float,
    status: CampaignStatus,
    start_at: datetime | None = None,
    end_at: datetime | None = None,
) -> Campaign:
    db_campaign = Campaign(
        name=name,
        channel=channel,
        discount_pct=discount_pct,
        status=status,
        start_at=start_at,
        end_at=end_at,
    )
    db.add(db_campaign)
    db.flush()
    db.refresh(db_campaign)
    return db_campaign


def get_campaigns(
    db: Session,
    limit: int = 20,
    status: CampaignStatus | None = None,
    channel: str | None = None,
    search: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
) -> list[Campaign]:
    """Кампании с фильтрами, от новых к старым."""
    query = db.query(Campaign)
    if status is not None:
        query = query.filter(Campaign.status == status)
    if channel:
        query = query.filter(Campaign.channel == channel)
    if search:
        query = query.filter(Campaign.name.like(f"%{search}%"))
    if created_from is not None:
        query = query.filter(Campaign.created_at >= created_from)
    if created_to is not None:
        query = query.filter(Campaign.created_at <= created_to)
    return query.order_by(Campaign.id.desc()).limit(limit).all()
