"""Revenue-over-time buckets for the dashboard chart."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Literal

from zawadii_api.core.clock import ensure_aware
from zawadii_api.models import CustomerInteraction

Timeframe = Literal["Month", "Week", "Day"]

_MONTH_LABELS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")
_WEEKDAY_LABELS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")
_DAY_BUCKET_HOURS = 3


@dataclass
class RevenuePoint:
    key: str
    label: str
    value: Decimal


def _month_buckets(now: datetime) -> list[RevenuePoint]:
    points = []
    for offset in range(11, -1, -1):
        index = now.year * 12 + (now.month - 1) - offset
        year, month = divmod(index, 12)
        points.append(RevenuePoint(key=f"{year}-{month + 1:02d}", label=_MONTH_LABELS[month], value=Decimal("0")))
    return points


def _week_buckets(now: datetime) -> list[RevenuePoint]:
    points = []
    for offset in range(6, -1, -1):
        day = (now - timedelta(days=offset)).date()
        points.append(RevenuePoint(key=day.isoformat(), label=_WEEKDAY_LABELS[day.weekday()], value=Decimal("0")))
    return points


def _day_buckets() -> list[RevenuePoint]:
    return [
        RevenuePoint(key=f"{hour:02d}:00", label=f"{hour:02d}:00", value=Decimal("0"))
        for hour in range(0, 24, _DAY_BUCKET_HOURS)
    ]


def _bucket_key(moment: datetime, timeframe: Timeframe, now: datetime) -> str | None:
    if timeframe == "Month":
        return f"{moment.year}-{moment.month:02d}"
    if timeframe == "Week":
        return moment.date().isoformat()
    if moment.date() != now.date():
        return None
    hour = moment.hour - moment.hour % _DAY_BUCKET_HOURS
    return f"{hour:02d}:00"


def revenue_series(
    interactions: Iterable[CustomerInteraction],
    timeframe: Timeframe,
    *,
    now: datetime,
) -> list[RevenuePoint]:
    """Sum ``amount_spent`` per bucket; activity outside the window is ignored."""

    now = ensure_aware(now)
    if timeframe == "Month":
        buckets = _month_buckets(now)
    elif timeframe == "Week":
        buckets = _week_buckets(now)
    elif timeframe == "Day":
        buckets = _day_buckets()
    else:
        raise ValueError(f"Unsupported timeframe: {timeframe}")

    index = {point.key: point for point in buckets}
    for row in interactions:
        if row.created_at is None:
            continue
        moment = ensure_aware(row.created_at).astimezone(now.tzinfo)
        point = index.get(_bucket_key(moment, timeframe, now) or "")
        if point is not None:
            point.value += Decimal(row.amount_spent or 0)
    return buckets
