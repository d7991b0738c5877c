from datetime import datetime
from uuid import UUID

from zawadii_api.models.promotion import PromotionStatus
from zawadii_api.schemas.base import ApiModel


class PromotionCreate(ApiModel):
    title: str
    description: str
    image_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: PromotionStatus = PromotionStatus.ACTIVE


class PromotionUpdate(ApiModel):
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: PromotionStatus | None = None


class PromotionResponse(ApiModel):
    id: UUID
    business_id: UUID
    title: str
    description: str
    image_url: str | None
    start_date: datetime | None
    end_date: datetime | None
    status: PromotionStatus
    created_at: datetime
