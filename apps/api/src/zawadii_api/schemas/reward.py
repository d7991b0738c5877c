from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from zawadii_api.models.reward import RewardCodeStatus
from zawadii_api.schemas.base import ApiModel


class RewardCreate(ApiModel):
    title: str
    description: str | None = None
    points_required: int
    cost: Decimal | None = None
    is_active: bool = True
    image_url: str | None = None
    terms_and_conditions: str | None = None
    uses_default_terms: bool = True
    expiry_date: datetime | None = None


class RewardUpdate(ApiModel):
    title: str | None = None
    description: str | None = None
    points_required: int | None = None
    cost: Decimal | None = None
    is_active: bool | None = None
    image_url: str | None = None
    terms_and_conditions: str | None = None
    uses_default_terms: bool | None = None
    expiry_date: datetime | None = None


class RewardResponse(ApiModel):
    id: UUID
    business_id: UUID
    title: str
    description: str | None
    points_required: int
    cost: float | None
    is_active: bool
    image_url: str | None
    terms_and_conditions: str | None
    uses_default_terms: bool
    expiry_date: datetime | None
    created_at: datetime


class RewardSummaryResponse(RewardResponse):
    redemption_count: int = 0
    available_codes: int = 0


class RewardDeletionResponse(ApiModel):
    reward_id: UUID
    deleted_codes: int


class DefaultTermsResponse(ApiModel):
    terms: str


class CodeGenerationRequest(ApiModel):
    quantity: int = Field(10, ge=1)
    issue_date: date | None = None


class RewardCodeResponse(ApiModel):
    id: UUID
    reward_id: UUID
    reward_title: str | None = None
    code: str
    status: RewardCodeStatus
    customer_id: UUID | None
    customer_name: str | None = None
    bought_at: datetime | None
    redeemed_at: datetime | None
    created_at: datetime


class CodeBatchResponse(ApiModel):
    reward_id: UUID
    count: int
    codes: list[RewardCodeResponse]


class CodePreviewResponse(ApiModel):
    code: str


class CodeListResponse(ApiModel):
    items: list[RewardCodeResponse]
    counts: dict[str, int]


class BulkDeleteRequest(ApiModel):
    code_ids: list[UUID]


class BulkDeleteResponse(ApiModel):
    deleted: int
    unused: int
    bought: int


class RedeemCodeRequest(ApiModel):
    code: str


class RewardStatisticsResponse(ApiModel):
    total_codes: int
    redeemed_codes: int
    redemption_rate: int
    rewards_budget: float
    amount_spent_this_month: float
    roi_this_month: int
    monthly_redemptions: int
    most_popular_reward: str
