# app/routers/v1/endpoints/campaigns.py

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.dependencies import get_cache, get_db
from app.models.enums import CampaignStatus
from app.schemas.campaign import Campaign, CampaignCreate
from app.schemas.common import ApiResponse
from app.services import campaign as campaign_service
from app.utils.params import parse_enum, parse_limit

router = APIRouter()


@router.post("/campaigns", response_model=ApiResponse[Campaign])
async def create_campaign(
    payload: CampaignCreate,
    db: Session = Depends(get_db),
    cache: CacheStore = Depends(get_cache),
):
    campaign = await campaign_service.create_campaign(db, cache, payload)
    return ApiResponse(data=campaign)


@router.get("/campaigns", response_model=ApiResponse[List[Campaign]])
async def list_campaigns(
    status: str | None = Query(None, description="draft, active или closed"),
    channel: str | None = Query(None),
    limit: str | None = Query(None, description="1..100, по умолчанию 20"),
    db: Session = Depends(get_db),
):
    campaigns = await campaign_service.list_campaigns(
        db,
        limit=parse_limit(limit),
        status=parse_enum(CampaignStatus, status, campaign_service.CAMPAIGN_STATUS_ERROR),
        channel=(channel or "").strip(),
    )
    return ApiResponse(data=campaigns)
