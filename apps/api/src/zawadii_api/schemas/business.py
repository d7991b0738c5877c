from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import Field

from zawadii_api.models.business import BusinessStatus
from zawadii_api.schemas.base import ApiModel


class BusinessCreate(ApiModel):
    name: str
    category: str
    owner_user_id: str | None = None
    description: str | None = None
    location_description: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None


class BusinessInformationUpdate(ApiModel):
    name: str | None = None
    category: str | None = None
    description: str | None = None
    location_description: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None
    website: str | None = None
    whatsapp: str | None = None
    status: BusinessStatus | None = None


class RewardConfigurationUpdate(ApiModel):
    points_conversion: Decimal
    tin: str | None = None


class BrandIdentityUpdate(ApiModel):
    instagram: str | None = None
    tiktok: str | None = None
    x_handle: str | None = None
    whatsapp: str | None = None
    website: str | None = None
    logo_url: str | None = None
    cover_image_url: str | None = None
    carousel_images: list[str] | None = None
    operating_hours: dict[str, Any] | None = None


class BusinessResponse(ApiModel):
    id: UUID
    owner_user_id: str | None
    name: str
    category: str | None
    description: str | None
    location_description: str | None
    address: str | None
    phone_number: str | None
    email: str | None
    website: str | None
    whatsapp: str | None
    instagram: str | None
    tiktok: str | None
    x_handle: str | None
    logo_url: str | None
    cover_image_url: str | None
    carousel_images: list[str] | None = None
    operating_hours: dict[str, Any] | None
    tin: str | None
    status: BusinessStatus
    points_conversion: float
    created_at: datetime


class LoyaltySettingsPayload(ApiModel):
    money_points_ratio: Decimal = Field(..., gt=0)


class LoyaltySettingsResponse(ApiModel):
    money_points_ratio: float
