"""Combined dashboard report for one business."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from zawadii_api.core.clock import utcnow
from zawadii_api.models import Business, CustomerReward
from zawadii_api.services.customers import CustomerDirectoryService, CustomerMetrics
from zawadii_api.services.reporting.revenue import RevenuePoint, Timeframe, revenue_series
from zawadii_api.services.rewards import RewardStatistics, RewardStatisticsService

RECENT_REWARDS_LIMIT = 10


@dataclass
class DashboardReport:
    timeframe: Timeframe
    metrics: CustomerMetrics
    revenue: list[RevenuePoint]
    rewards: RewardStatistics
    recent_rewards: list[CustomerReward]


class ReportService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def dashboard(
        self,
        business: Business,
        *,
        timeframe: Timeframe = "Month",
        now: datetime | None = None,
    ) -> DashboardReport:
        now = now or utcnow()
        directory = await CustomerDirectoryService(self._session).load(business, now=now)
        rewards = await RewardStatisticsService(self._session).summary(business, now=now)
        recent = (
            await self._session.execute(
                select(CustomerReward)
                .where(CustomerReward.business_id == business.id)
                .options(selectinload(CustomerReward.reward), selectinload(CustomerReward.customer))
                .order_by(CustomerReward.created_at.desc())
                .limit(RECENT_REWARDS_LIMIT)
            )
        ).scalars().all()
        return DashboardReport(
            timeframe=timeframe,
            metrics=directory.metrics,
            revenue=revenue_series(directory.interactions, timeframe, now=now),
            rewards=rewards,
            recent_rewards=list(recent),
        )
