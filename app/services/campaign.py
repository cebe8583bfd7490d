# app/services/campaign.py

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.core.errors import ApiError
from app.crud import campaign as crud_campaign
from app.db.session import run_in_session
from app.models.enums import CampaignStatus
from app.schemas.campaign import Campaign, CampaignCreate
from app.services.reports import invalidate_summary_cache
from app.utils.params import parse_enum
from app.utils.timeutils import parse_optional_rfc3339

logger = logging.getLogger(__name__)

CAMPAIGN_STATUS_ERROR = "status must be draft, active or closed"


async def create_campaign(db: Session, cache: CacheStore, payload: CampaignCreate) -> Campaign:
    name = payload.name.strip()
    channel = payload.channel.strip()

    if not name or not channel:
        raise ApiError(400, "name and channel are required")
    if payload.discount_pct <= 0 or payload.discount_pct > 100:
        raise ApiError(400, "discountPct must be in (0, 100]")
    status = parse_enum(CampaignStatus, payload.status, CAMPAIGN_STATUS_ERROR) or CampaignStatus.ACTIVE

    try:
        start_at = parse_optional_rfc3339(payload.start_at)
    except ValueError:
        raise ApiError(400, "startAt must be RFC3339 format")
    try:
        end_at = parse_optional_rfc3339(payload.end_at)
    except ValueError:
        raise ApiError(400, "endAt must be RFC3339 format")
    if start_at is not None and end_at is not None and end_at < start_at:
        raise ApiError(400, "endAt cannot be earlier than startAt")

    try:
        db_campaign = await run_in_session(
            db,
            crud_campaign.create_campaign,
            name=name,
            channel=channel,
            discount_pct=payload.discount_pct,
            status=status,
            start_at=start_at,
            end_at=end_at,
        )
    except SQLAlchemyError:
        logger.error("Failed to create campaign.", exc_info=True)
        raise ApiError(500, "create campaign failed")

    logger.info(f"Campaign {db_campaign.id} '{name}' created (channel={channel}, status={status.value}).")
    await invalidate_summary_cache(cache)
    return Campaign.model_validate(db_campaign)


async def list_campaigns(
    db: Session,
    limit: int,
    status: CampaignStatus | None = None,
    channel: str | None = None,
) -> list[Campaign]:
    try:
        campaigns = await run_in_session(
            db, crud_campaign.get_campaigns, limit=limit, status=status, channel=channel or None
        )
    except SQLAlchemyError:
        logger.error("Failed to list campaigns.", exc_info=True)
        raise ApiError(500, "list campaigns failed")
    return [Campaign.model_validate(c) for c in campaigns]
