# app/crud/reports.py

from datetime import datetime
from typing import Any

from sqlalchemy import and_, desc, distinct, func, or_, select
from sqlalchemy.orm import Query, Session, aliased

from app.models.campaign import Campaign
from app.models.enums import CampaignStatus, OrderStatus
from app.models.member import Member
from app.models.order import Order

# --- Агрегаты для сводки ---

def count_all_orders(db: Session) -> int:
    return db.query(func.count(Order.id)).scalar() or 0


def count_active_campaigns(db: Session) -> int:
    return db.query(func.count(Campaign.id)).filter(Campaign.status == CampaignStatus.ACTIVE).scalar() or 0


def get_paid_orders_totals(db: Session) -> tuple[int, int]:
    """Количество оплаченных заказов и их сумма."""
    paid_count, revenue = db.query(
        func.count(Order.id),
        func.coalesce(func.sum(Order.amount_cents), 0),
    ).filter(Order.status == OrderStatus.PAID).one()
    return int(paid_count or 0), int(revenue or 0)


def repurchase_members_select():
    """ID участников с двумя и более оплаченными заказами."""
    paid_order = aliased(Order)
    return (
        select(paid_order.member_id)
        .where(paid_order.status == OrderStatus.PAID)
        .group_by(paid_order.member_id)
        .having(func.count(paid_order.id) >= 2)
    )


def count_repurchase_members(db: Session) -> int:
    subquery = repurchase_members_select().subquery()
    return db.query(func.count()).select_from(subquery).scalar() or 0


def get_channel_breakdown(db: Session) -> list[tuple[str, int]]:
    """Количество участников по каналам, от большего к меньшему."""
    member_count = func.count(Member.id).label("member_count")
    rows = (
        db.query(Member.channel, member_count)
        .group_by(Member.channel)
        .order_by(desc("member_count"), Member.channel.asc())
        .all()
    )
    return [(row.channel, int(row.member_count)) for row in rows]


# --- Список на повторный контакт ---

def get_followup_rows(
    db: Session,
    cutoff: datetime,
    limit: int = 50,
    channel: str | None = None,
) -> list[Any]:
    """
    Участники, у которых ровно один оплаченный заказ, либо последний
    оплаченный заказ не новее cutoff. Сначала самые "давние".
    """
    paid_order_count = func.count(Order.id)
    last_paid_at = func.max(Order.paid_at)

    query = db.query(
        Member.id.label("member_id"),
        Member.name.label("member_name"),
        Member.phone.label("phone"),
        Member.channel.label("channel"),
        paid_order_count.label("paid_order_count"),
        func.coalesce(func.sum(Order.amount_cents), 0).label("paid_amount_cents"),
        last_paid_at.label("last_paid_at"),
    ).outerjoin(
        Order, and_(Order.member_id == Member.id, Order.status == OrderStatus.PAID)
    )
    if channel:
        query = query.filter(Member.channel == channel)

    return (
        query.group_by(Member.id, Member.name, Member.phone, Member.channel)
        .having(or_(paid_order_count == 1, last_paid_at <= cutoff))
        .order_by(last_paid_at.asc(), Member.id.asc())
        .limit(limit)
        .all()
    )


# --- Атрибуция кампаний ---

def campaign_paid_orders(db: Session, campaign: Campaign) -> Query:
    """Оплаченные заказы из канала кампании, попавшие в ее окно."""
    query = db.query(Order).filter(
        Order.status == OrderStatus.PAID,
        Order.source == campaign.channel,
    )
    if campaign.start_at is not None:
        query = query.filter(Order.paid_at >= campaign.start_at)
    if campaign.end_at is not None:
        query = query.filter(Order.paid_at <= campaign.end_at)
    return query


def get_campaign_attribution_counts(db: Session, campaign: Campaign) -> dict[str, int]:
    """
    Считает метрики одной кампании отдельными запросами.
    Вызывается по разу на каждую кампанию отчета.
    """
    target_member_count = db.query(func.count(Member.id)).filter(Member.channel == campaign.channel).scalar() or 0

    orders = campaign_paid_orders(db, campaign)
    paid_order_count = orders.with_entities(func.count(Order.id)).scalar() or 0
    revenue_cents = orders.with_entities(func.coalesce(func.sum(Order.amount_cents), 0)).scalar() or 0
    converted_member_count = orders.with_entities(func.count(distinct(Order.member_id))).scalar() or 0
    repurchase_converted_count = (
        orders.filter(Order.member_id.in_(repurchase_members_select()))
        .with_entities(func.count(distinct(Order.member_id)))
        .scalar()
        or 0
    )

    return {
        "target_member_count": int(target_member_count),
        "paid_order_count": int(paid_order_count),
        "revenue_cents": int(revenue_cents),
        "converted_member_count": int(converted_member_count),
        "repurchase_converted_count": int(repurchase_converted_count),
    }
