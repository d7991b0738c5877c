from datetime import datetime
from typing import Literal
from uuid import UUID

from zawadii_api.schemas.base import ApiModel
from zawadii_api.schemas.customer import CustomerMetricsResponse
from zawadii_api.schemas.reward import RewardStatisticsResponse


class RevenuePointResponse(ApiModel):
    key: str
    label: str
    value: float


class RecentRewardResponse(ApiModel):
    id: UUID
    reward_title: str | None
    customer_name: str | None
    status: str
    created_at: datetime


class DashboardResponse(ApiModel):
    timeframe: Literal["Month", "Week", "Day"]
    metrics: CustomerMetricsResponse
    revenue: list[RevenuePointResponse]
    rewards: RewardStatisticsResponse
    recent_rewards: list[RecentRewardResponse]
