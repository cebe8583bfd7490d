# app/utils/timeutils.py

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Наивные даты считаем UTC (так их возвращает SQLite)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_optional_rfc3339(raw: str | None) -> datetime | None:
    """
    Строгий разбор RFC 3339: обязательны дата, время через 'T' и смещение.
    Пустая строка -> None. Результат приводится к UTC.
    """
    raw = (raw or "").strip()
    if not raw:
        return None
    if "T" not in raw and "t" not in raw:
        raise ValueError("missing time component")
    normalized = raw
    if normalized[-1] in ("Z", "z"):
        normalized = normalized[:-1] + "+00:00"
    value = datetime.fromisoformat(normalized.replace("t", "T"))
    if value.tzinfo is None:
        raise ValueError("missing timezone offset")
    return value.astimezone(timezone.utc)


def format_rfc3339(value: datetime | None) -> str:
    if value is None:
        return ""
    return to_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")
