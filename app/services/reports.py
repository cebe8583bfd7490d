# app/services/reports.py

import csv
import io
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.core.errors import ApiError
from app.crud import campaign as crud_campaign
from app.crud import member as crud_member
from app.crud import reports as crud_reports
from app.db.session import REPORT_TIMEOUT_SECONDS, run_in_session
from app.models.enums import CampaignStatus
from app.schemas.reports import (
    CampaignAttributionRow,
    ChannelBreakdown,
    FollowupList,
    FollowupMember,
    Summary,
)
from app.utils.timeutils import format_rfc3339, to_utc, utcnow

logger = logging.getLogger(__name__)

SUMMARY_CACHE_KEY = "merchant_ops:summary"
SUMMARY_CACHE_TTL_SECONDS = 45

ATTRIBUTION_CSV_HEADER = [
    "campaign_id",
    "campaign_name",
    "channel",
    "status",
    "start_at",
    "end_at",
    "target_member_count",
    "paid_order_count",
    "converted_member_count",
    "repurchase_converted_count",
    "revenue_cents",
    "conversion_rate",
]


def percentage(numerator: int, denominator: int) -> float:
    """Доля в процентах с двумя знаками; при нулевом знаменателе 0."""
    if denominator <= 0:
        return 0.0
    # Округление "половина вверх", как у math.Round, а не банковское
    return math.floor(numerator / denominator * 10000 + 0.5) / 100


# --- Сводка ---

def compute_summary(db: Session) -> Summary:
    member_count = crud_member.count_members(db)
    order_count = crud_reports.count_all_orders(db)
    active_campaign_count = crud_reports.count_active_campaigns(db)
    paid_order_count, revenue_cents = crud_reports.get_paid_orders_totals(db)
    repurchase_count = crud_reports.count_repurchase_members(db)
    channels = crud_reports.get_channel_breakdown(db)

    return Summary(
        member_count=member_count,
        order_count=order_count,
        paid_order_count=paid_order_count,
        revenue_cents=revenue_cents,
        repurchase_count=repurchase_count,
        repurchase_rate=percentage(repurchase_count, member_count),
        active_campaign_count=active_campaign_count,
        channel_breakdown=[ChannelBreakdown(channel=c, member_count=n) for c, n in channels],
    )


async def _read_cached_summary(cache: CacheStore) -> Summary | None:
    try:
        cached_data, found = await cache.get(SUMMARY_CACHE_KEY)
    except Exception:
        logger.warning("Summary cache read failed, recomputing.", exc_info=True)
        return None
    if not found:
        return None
    try:
        return Summary.model_validate_json(cached_data)
    except ValidationError as e:
        logger.warning(f"Failed to decode cached summary: {e}. Recomputing.")
        return None


async def invalidate_summary_cache(cache: CacheStore) -> None:
    """Сбрасывает сводку после любого успешного создания сущности."""
    try:
        await cache.delete(SUMMARY_CACHE_KEY)
    except Exception:
        logger.warning("Failed to invalidate summary cache.", exc_info=True)


async def get_summary(db: Session, cache: CacheStore) -> Summary:
    """
    Возвращает сводку, используя кеширование на 45 секунд.
    Ошибки кеша не роняют запрос: просто считаем заново.
    """
    cached = await _read_cached_summary(cache)
    if cached is not None:
        logger.info("Serving summary from cache.")
        return cached

    logger.info("Calculating fresh summary.")
    try:
        summary = await run_in_session(db, compute_summary)
    except SQLAlchemyError:
        logger.error("Failed to aggregate summary.", exc_info=True)
        raise ApiError(500, "aggregate summary failed")

    try:
        await cache.set(SUMMARY_CACHE_KEY, summary.model_dump_json(by_alias=True), SUMMARY_CACHE_TTL_SECONDS)
    except Exception:
        logger.warning("Failed to store summary in cache.", exc_info=True)
    return summary


# --- Список на повторный контакт ---

def days_since(moment: datetime | None, now: datetime) -> int:
    if moment is None:
        return 0
    days = math.floor((now - to_utc(moment)).total_seconds() / 86400)
    return max(days, 0)


def load_followups(db: Session, days: int, limit: int, channel: str | None = None) -> FollowupList:
    now = utcnow()
    rows = crud_reports.get_followup_rows(db, cutoff=now - timedelta(days=days), limit=limit, channel=channel)
    items = [
        FollowupMember(
            member_id=row.member_id,
            member_name=row.member_name,
            phone=row.phone,
            channel=row.channel,
            paid_order_count=int(row.paid_order_count),
            paid_amount_cents=int(row.paid_amount_cents or 0),
            last_paid_at=row.last_paid_at,
            days_since_last_pay=days_since(row.last_paid_at, now),
        )
        for row in rows
    ]
    return FollowupList(days_window=days, items=items)


async def get_followups(db: Session, days: int, limit: int, channel: str | None = None) -> FollowupList:
    try:
        return await run_in_session(db, load_followups, days, limit, channel or None)
    except SQLAlchemyError:
        logger.error("Failed to list followups.", exc_info=True)
        raise ApiError(500, "list followups failed")


# --- Атрибуция кампаний ---

@dataclass
class AttributionFilters:
    limit: int = 100
    status: CampaignStatus | None = None
    channel: str | None = None
    search: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None


def load_campaign_attribution_rows(db: Session, filters: AttributionFilters) -> list[CampaignAttributionRow]:
    campaigns = crud_campaign.get_campaigns(
        db,
        limit=filters.limit,
        status=filters.status,
        channel=filters.channel,
        search=filters.search,
        created_from=filters.created_from,
        created_to=filters.created_to,
    )

    rows = []
    # Отдельный набор запросов на каждую кампанию
    for campaign in campaigns:
        counts = crud_reports.get_campaign_attribution_counts(db, campaign)
        rows.append(CampaignAttributionRow(
            campaign_id=campaign.id,
            campaign_name=campaign.name,
            channel=campaign.channel,
            status=campaign.status,
            start_at=campaign.start_at,
            end_at=campaign.end_at,
            conversion_rate=percentage(counts["converted_member_count"], counts["target_member_count"]),
            **counts,
        ))
    return rows


async def get_campaign_attribution(db: Session, filters: AttributionFilters) -> list[CampaignAttributionRow]:
    try:
        return await run_in_session(db, load_campaign_attribution_rows, filters, timeout=REPORT_TIMEOUT_SECONDS)
    except SQLAlchemyError:
        logger.error("Failed to build campaign attribution report.", exc_info=True)
        raise ApiError(500, "campaign attribution failed")


def build_campaign_attribution_csv(rows: list[CampaignAttributionRow]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(ATTRIBUTION_CSV_HEADER)
    for row in rows:
        writer.writerow([
            row.campaign_id,
            row.campaign_name,
            row.channel,
            row.status.value,
            format_rfc3339(row.start_at),
            format_rfc3339(row.end_at),
            row.target_member_count,
            row.paid_order_count,
            row.converted_member_count,
            row.repurchase_converted_count,
            row.revenue_cents,
            f"{row.conversion_rate:.2f}",
        ])
    return buffer.getvalue()
