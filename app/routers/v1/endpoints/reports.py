# app/routers/v1/endpoints/reports.py

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.core.errors import ApiError
from app.dependencies import get_cache, get_db
from app.models.enums import CampaignStatus
from app.schemas.common import ApiResponse
from app.schemas.reports import CampaignAttribution, FollowupList, Summary
from app.services import reports as reports_service
from app.services.campaign import CAMPAIGN_STATUS_ERROR
from app.utils.params import parse_days, parse_enum, parse_limit
from app.utils.timeutils import parse_optional_rfc3339

logger = logging.getLogger(__name__)
router = APIRouter()


def get_attribution_filters(
    status: str | None = Query(None, description="draft, active или closed"),
    channel: str | None = Query(None),
    q: str | None = Query(None, description="Подстрока в названии кампании"),
    from_: str | None = Query(None, alias="from", description="RFC 3339, по дате создания кампании"),
    to: str | None = Query(None, description="RFC 3339, по дате создания кампании"),
    limit: str | None = Query(None, description="1..100, по умолчанию 100"),
) -> reports_service.AttributionFilters:
    """Общие фильтры отчета и его CSV-выгрузки."""
    try:
        created_from = parse_optional_rfc3339(from_)
    except ValueError:
        raise ApiError(400, "from must be RFC3339 format")
    try:
        created_to = parse_optional_rfc3339(to)
    except ValueError:
        raise ApiError(400, "to must be RFC3339 format")
    if created_from is not None and created_to is not None and created_to < created_from:
        raise ApiError(400, "to cannot be earlier than from")

    return reports_service.AttributionFilters(
        limit=parse_limit(limit, fallback=100),
        status=parse_enum(CampaignStatus, status, CAMPAIGN_STATUS_ERROR),
        channel=(channel or "").strip() or None,
        search=(q or "").strip() or None,
        created_from=created_from,
        created_to=created_to,
    )


@router.get("/summary", response_model=ApiResponse[Summary])
async def get_summary(
    db: Session = Depends(get_db),
    cache: CacheStore = Depends(get_cache),
):
    """Сводные метрики магазина. Кешируются на 45 секунд."""
    summary = await reports_service.get_summary(db, cache)
    return ApiResponse(data=summary)


@router.get("/followups", response_model=ApiResponse[FollowupList])
async def list_followups(
    days: str | None = Query(None, description="Порог неактивности в днях, 1..365, по умолчанию 30"),
    channel: str | None = Query(None),
    limit: str | None = Query(None, description="1..100, по умолчанию 50"),
    db: Session = Depends(get_db),
):
    """Участники, с которыми стоит связаться повторно."""
    followups = await reports_service.get_followups(
        db,
        days=parse_days(days),
        limit=parse_limit(limit, fallback=50),
        channel=(channel or "").strip(),
    )
    return ApiResponse(data=followups)


@router.get("/reports/campaign-attribution", response_model=ApiResponse[CampaignAttribution])
async def get_campaign_attribution(
    filters: reports_service.AttributionFilters = Depends(get_attribution_filters),
    db: Session = Depends(get_db),
):
    rows = await reports_service.get_campaign_attribution(db, filters)
    return ApiResponse(data=CampaignAttribution(rows=rows))


@router.get("/reports/campaign-attribution/export")
async def export_campaign_attribution(
    filters: reports_service.AttributionFilters = Depends(get_attribution_filters),
    db: Session = Depends(get_db),
):
    """Тот же отчет в виде CSV-файла."""
    rows = await reports_service.get_campaign_attribution(db, filters)
    content = reports_service.build_campaign_attribution_csv(rows)
    logger.info(f"Exporting campaign attribution CSV with {len(rows)} rows.")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=campaign-attribution.csv"},
    )
