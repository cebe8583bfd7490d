# app/schemas/member.py

from app.schemas.common import CamelModel, UtcDatetime


class MemberCreate(CamelModel):
    # Пустые значения отсекаются в сервисе после strip()
    name: str = ""
    phone: str = ""
    channel: str = ""


class Member(CamelModel):
    id: int
    name: str
    phone: str
    channel: str
    created_at: UtcDatetime
