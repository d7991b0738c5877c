from datetime import datetime
from decimal import Decimal
from uuid import UUID

from zawadii_api.schemas.base import ApiModel


class ActivityCreate(ApiModel):
    phone_number: str
    name: str
    amount: str | Decimal
    award_points: bool = True
    note: str | None = None


class ActivityEstimateRequest(ApiModel):
    amount: str | Decimal | None = None
    award_points: bool = True


class ActivityEstimateResponse(ApiModel):
    points: int
    cashback: float
    points_conversion: float
    money_points_ratio: float


class InteractionResponse(ApiModel):
    id: UUID
    business_id: UUID
    customer_id: UUID | None
    interaction_type: str
    amount_spent: float
    points_awarded: int
    phone_number: str | None
    name: str | None
    optional_note: str | None
    created_at: datetime


class ActivityRecordResponse(ApiModel):
    interaction: InteractionResponse
    points_awarded: int
    is_app_customer: bool
    sms_sent: bool
    sms_error: str | None = None
