# app/crud/member.py

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.member import Member


def get_member_by_id(db: Session, member_id: int) -> Member | None:
    return db.query(Member).filter(Member.id == member_id).first()


def create_member(db: Session, name: str, phone: str, channel: str) -> Member:
    """
    Создает участника. Дубликат телефона -> IntegrityError при flush.
    Требует внешнего вызова db.commit() (его делает run_in_session).
    """
    db_member = Member(name=name, phone=phone, channel=channel)
    db.add(db_member)
    db.flush()
    db.refresh(db_member)
    return db_member


def get_members(db: Session, limit: int = 20, search: str | None = None) -> list[Member]:
    """Последние участники, опционально с поиском по имени или телефону."""
    query = db.query(Member)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Member.name.like(like), Member.phone.like(like)))
    return query.order_by(Member.id.desc()).limit(limit).all()


def count_members(db: Session, channel: str | None = None) -> int:
    query = db.query(Member)
    if channel is not None:
        query = query.filter(Member.channel == channel)
    return query.count()
