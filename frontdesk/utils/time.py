from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

import dateparser
from tzlocal import get_localzone_name


def get_local_timezone() -> str:
    try:
        return get_localzone_name()
    except Exception:
        return "UTC"


def resolve_timezone(name: str | None) -> ZoneInfo:
    if not name or name.lower() == "local":
        name = get_local_timezone()
    return ZoneInfo(name)


def utcnow() -> datetime:
    return datetime.now(dt_timezone.utc)


def as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value


def local_date(value: datetime, timezone: str | None) -> date:
    return as_aware(value).astimezone(resolve_timezone(timezone)).date()


def local_today(timezone: str | None) -> date:
    return utcnow().astimezone(resolve_timezone(timezone)).date()


def parse_appointment_time(value: str | datetime | None, timezone: str | None) -> datetime | None:
    """Turn operator input ("now", "today 3pm", an ISO timestamp) into an aware UTC datetime.

    Returns None when the text cannot be understood; an empty value means "now".
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return utcnow()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=resolve_timezone(timezone))
        return value.astimezone(dt_timezone.utc)

    tz_name = str(resolve_timezone(timezone))
    settings = {
        "RETURN_AS_TIMEZONE_AWARE": True,
        "TIMEZONE": tz_name,
        "TO_TIMEZONE": "UTC",
        "PREFER_DATES_FROM": "future",
    }

    parsed = dateparser.parse(value, settings=settings)
    if not parsed:
        return None
    return parsed.astimezone(dt_timezone.utc)
