"""Reward program performance figures."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from zawadii_api.core.clock import ensure_aware, month_start, utcnow
from zawadii_api.core.settings import settings
from zawadii_api.models import Business, RewardCode, RewardCodeStatus
from zawadii_api.services.loyalty import implied_customer_spend


@dataclass
class RewardStatistics:
    total_codes: int
    redeemed_codes: int
    redemption_rate: int
    rewards_budget: Decimal
    amount_spent_this_month: Decimal
    roi_this_month: int
    monthly_redemptions: int
    most_popular_reward: str


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _cost(code: RewardCode) -> Decimal:
    reward = code.reward
    if reward is None or reward.cost is None:
        return Decimal("0")
    return Decimal(reward.cost)


def summarize_codes(
    codes: Iterable[RewardCode],
    *,
    conversion_rate: Decimal,
    now: datetime,
) -> RewardStatistics:
    """Aggregate code rows (with their rewards loaded) into dashboard figures."""

    codes = list(codes)
    since = month_start(now)
    redeemed = [code for code in codes if code.status == RewardCodeStatus.REDEEMED]
    redeemed_this_month = [
        code for code in redeemed if code.bought_at is not None and ensure_aware(code.bought_at) >= since
    ]

    total = len(codes)
    rate = _round_half_up(Decimal(len(redeemed)) * 100 / total) if total else 0

    budget = sum((_cost(code) for code in codes if code.status == RewardCodeStatus.UNUSED), Decimal("0"))
    spent = sum((_cost(code) for code in redeemed_this_month), Decimal("0"))
    roi = sum(
        (
            implied_customer_spend(code.reward.points_required, conversion_rate)
            for code in redeemed_this_month
            if code.customer_id is not None and code.reward is not None
        ),
        Decimal("0"),
    )

    titles = Counter(code.reward.title for code in redeemed_this_month if code.reward is not None)
    most_popular = titles.most_common(1)[0][0] if titles else "None"

    return RewardStatistics(
        total_codes=total,
        redeemed_codes=len(redeemed),
        redemption_rate=rate,
        rewards_budget=budget,
        amount_spent_this_month=spent,
        roi_this_month=_round_half_up(roi),
        monthly_redemptions=len(redeemed_this_month),
        most_popular_reward=most_popular,
    )


class RewardStatisticsService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def summary(self, business: Business, *, now: datetime | None = None) -> RewardStatistics:
        stmt = (
            select(RewardCode)
            .where(RewardCode.business_id == business.id)
            .options(selectinload(RewardCode.reward))
        )
        codes = (await self._session.execute(stmt)).scalars().all()
        conversion = business.points_conversion or Decimal(str(settings.default_points_conversion))
        return summarize_codes(codes, conversion_rate=Decimal(conversion), now=now or utcnow())
