# app/routers/v1/endpoints/members.py

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.cache import CacheStore
from app.dependencies import get_cache, get_db
from app.schemas.common import ApiResponse
from app.schemas.member import Member, MemberCreate
from app.services import member as member_service
from app.utils.params import parse_limit

router = APIRouter()


@router.post("/members", response_model=ApiResponse[Member])
async def create_member(
    payload: MemberCreate,
    db: Session = Depends(get_db),
    cache: CacheStore = Depends(get_cache),
):
    """Создает участника. Телефон должен быть уникальным."""
    member = await member_service.create_member(db, cache, payload)
    return ApiResponse(data=member)


@router.get("/members", response_model=ApiResponse[List[Member]])
async def list_members(
    q: str | None = Query(None, description="Поиск по имени или телефону"),
    limit: str | None = Query(None, description="1..100, по умолчанию 20"),
    db: Session = Depends(get_db),
):
    members = await member_service.list_members(db, limit=parse_limit(limit), search=(q or "").strip())
    return ApiResponse(data=members)
