from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.schemas.customer import CustomerMetricsResponse
from zawadii_api.schemas.report import DashboardResponse, RecentRewardResponse, RevenuePointResponse
from zawadii_api.schemas.reward import RewardStatisticsResponse
from zawadii_api.services.reporting import ReportService
from zawadii_api.services.rewards import RewardStatisticsService

router = APIRouter(
    prefix="/businesses/{business_id}/reports",
    tags=["Reports"],
    dependencies=[Depends(require_operator_api_key)],
)


@router.get("/dashboard", summary="Customer, revenue and reward overview", response_model=DashboardResponse)
async def dashboard(
    timeframe: Literal["Month", "Week", "Day"] = Query("Month"),
    business: Business = Depends(get_business),
    session: AsyncSession = Depends(get_session),
) -> DashboardResponse:
    report = await ReportService(session).dashboard(business, timeframe=timeframe)
    return DashboardResponse(
        timeframe=report.timeframe,
        metrics=CustomerMetricsResponse.model_validate(report.metrics),
        revenue=[RevenuePointResponse.model_validate(point) for point in report.revenue],
        rewards=RewardStatisticsResponse.model_validate(report.rewards),
        recent_rewards=[
            RecentRewardResponse(
                id=row.id,
                reward_title=row.reward.title if row.reward else None,
                customer_name=row.customer.display_name if row.customer else None,
                status=row.status.value,
                created_at=row.created_at,
            )
            for row in report.recent_rewards
        ],
    )


@router.get("/rewards", summary="Reward program statistics", response_model=RewardStatisticsResponse)
async def reward_statistics(
    business: Business = Depends(get_business),
    session: AsyncSession = Depends(get_session),
) -> RewardStatisticsResponse:
    summary = await RewardStatisticsService(session).summary(business)
    return RewardStatisticsResponse.model_validate(summary)
