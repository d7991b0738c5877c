"""Timezone helpers shared by services that compare stored timestamps."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat those as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_start(now: datetime) -> datetime:
    return ensure_aware(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def one_month_before(now: datetime) -> datetime:
    """Same day-of-month one month earlier, clamped to the shorter month."""

    now = ensure_aware(now)
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = now.day
    while True:
        try:
            return now.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1
