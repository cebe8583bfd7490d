# app/services/member.py

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.core.errors import ApiError
from app.crud import member as crud_member
from app.db.session import is_unique_violation, run_in_session
from app.schemas.member import Member, MemberCreate
from app.services.reports import invalidate_summary_cache

logger = logging.getLogger(__name__)


async def create_member(db: Session, cache: CacheStore, payload: MemberCreate) -> Member:
    name = payload.name.strip()
    phone = payload.phone.strip()
    channel = payload.channel.strip()
    if not name or not phone or not channel:
        raise ApiError(400, "name, phone and channel are required")

    try:
        db_member = await run_in_session(db, crud_member.create_member, name=name, phone=phone, channel=channel)
    except IntegrityError as e:
        if is_unique_violation(e):
            raise ApiError(400, "phone already exists")
        logger.error("Failed to create member.", exc_info=True)
        raise ApiError(500, "create member failed")
    except SQLAlchemyError:
        logger.error("Failed to create member.", exc_info=True)
        raise ApiError(500, "create member failed")

    logger.info(f"Member {db_member.id} created (channel={channel}).")
    await invalidate_summary_cache(cache)
    return Member.model_validate(db_member)


async def list_members(db: Session, limit: int, search: str | None = None) -> list[Member]:
    try:
        members = await run_in_session(db, crud_member.get_members, limit=limit, search=search or None)
    except SQLAlchemyError:
        logger.error("Failed to list members.", exc_info=True)
        raise ApiError(500, "list members failed")
    return [Member.model_validate(m) for m in members]
