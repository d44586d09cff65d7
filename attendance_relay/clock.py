import logging
from datetime import datetime, timezone
from typing import Callable

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc).replace(microsecond=0)


def resolve_tz(name: str):
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("clock.unknown_timezone name=%s fallback=UTC", name)
        return timezone.utc


def day_key(dt: datetime) -> str:
    # Naive values are taken as UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date().isoformat()


def format_timestamp(dt: datetime, tz) -> str:
    # ja-JP locale rendering: 2024/4/1 9:05:03
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    local = dt.astimezone(tz)
    return (
        f"{local.year}/{local.month}/{local.day} "
        f"{local.hour}:{local.minute:02d}:{local.second:02d}"
    )
