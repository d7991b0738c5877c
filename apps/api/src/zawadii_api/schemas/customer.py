from datetime import datetime
from typing import Literal
from uuid import UUID

from zawadii_api.schemas.base import ApiModel


class UnifiedCustomerResponse(ApiModel):
    id: str
    customer_id: UUID | None
    name: str
    phone_number: str
    email: str | None
    total_spend: float
    total_visits: int
    points: int
    last_visit: datetime | None
    last_visit_label: str
    created_at: datetime | None
    source: Literal["app", "sms", "points"]
    has_app: bool
    tag: str
    rpi: int
    lei: int
    spending_score: int
    secondary_status: Literal["Active", "At Risk", "Lapsed"]


class CustomerMetricsResponse(ApiModel):
    total_customers: int
    new_customers_this_month: int
    avg_spend_per_visit: float
    visit_frequency: float
    visit_frequency_display: str


class CustomerListResponse(ApiModel):
    items: list[UnifiedCustomerResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    metrics: CustomerMetricsResponse


class CustomerRewardResponse(ApiModel):
    id: UUID
    reward_id: UUID
    reward_title: str | None
    reward_code_id: UUID | None
    status: str
    points_spent: int
    claimed_at: datetime | None
    redeemed_at: datetime | None
    created_at: datetime


class CustomerDetailResponse(ApiModel):
    customer: UnifiedCustomerResponse
    rewards: list[CustomerRewardResponse]
