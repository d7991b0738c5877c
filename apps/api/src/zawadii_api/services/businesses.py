"""Business profile and reward configuration management."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.core.errors import NotFoundError, ValidationFailed
from zawadii_api.core.settings import settings
from zawadii_api.models import Business, BusinessStatus
from zawadii_api.services.validation import (
    PHONE_FORMAT_HINT,
    is_valid_email,
    is_valid_phone,
    is_valid_whatsapp,
    normalize_phone,
)

DESCRIPTION_MAX_LENGTH = 500
LOCATION_DESCRIPTION_MAX_LENGTH = 200
TIN_MIN_LENGTH = 8
CAROUSEL_MAX_IMAGES = 10

_BRAND_FIELDS = ("instagram", "tiktok", "x_handle", "whatsapp", "website", "logo_url", "cover_image_url")


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class BusinessService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_business(self, business_id: UUID) -> Business:
        business = await self._session.get(Business, business_id)
        if business is None:
            raise NotFoundError("Business not found")
        return business

    async def list_businesses(self, owner_user_id: str | None = None) -> Sequence[Business]:
        stmt = select(Business).order_by(Business.created_at.desc())
        if owner_user_id:
            stmt = stmt.where(Business.owner_user_id == owner_user_id)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def create_business(self, data: Mapping[str, Any], *, owner_user_id: str | None = None) -> Business:
        name = (data.get("name") or "").strip()
        category = (data.get("category") or "").strip()
        errors: dict[str, str] = {}
        if len(name) < 2:
            errors["name"] = "Business name must be at least 2 characters"
        if not category:
            errors["category"] = "Category is required"
        phone = data.get("phone_number")
        if phone:
            phone = normalize_phone(phone)
            if not is_valid_phone(phone):
                errors["phone_number"] = PHONE_FORMAT_HINT
        email = _clean(data.get("email"))
        if email and not is_valid_email(email):
            errors["email"] = "Please enter a valid email address"
        if errors:
            raise ValidationFailed(errors)

        business = Business(
            owner_user_id=owner_user_id,
            name=name,
            category=category,
            description=_clean(data.get("description")),
            location_description=_clean(data.get("location_description")),
            address=_clean(data.get("address")),
            phone_number=phone or None,
            email=email,
            status=BusinessStatus.ACTIVE,
            points_conversion=Decimal(str(settings.default_points_conversion)),
            carousel_images=[],
        )
        self._session.add(business)
        await self._session.commit()
        logger.info("Created business", business_id=str(business.id), category=category)
        return business

    async def update_information(self, business: Business, data: Mapping[str, Any]) -> Business:
        """Apply a profile edit; name, phone and e-mail must end up valid."""

        errors: dict[str, str] = {}
        name = (data.get("name", business.name) or "").strip()
        if not name:
            errors["name"] = "Business name is required"
        elif len(name) < 2:
            errors["name"] = "Business name must be at least 2 characters"

        phone = normalize_phone(data.get("phone_number", business.phone_number))
        if not phone:
            errors["phone_number"] = "Phone number is required"
        elif not is_valid_phone(phone):
            errors["phone_number"] = PHONE_FORMAT_HINT

        email = (data.get("email", business.email) or "").strip()
        if not email:
            errors["email"] = "Email is required"
        elif not is_valid_email(email):
            errors["email"] = "Please enter a valid email address"

        description = _clean(data.get("description", business.description))
        if description and len(description) > DESCRIPTION_MAX_LENGTH:
            errors["description"] = f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"

        location = _clean(data.get("location_description", business.location_description))
        if location and len(location) > LOCATION_DESCRIPTION_MAX_LENGTH:
            errors["location_description"] = (
                f"Location description must be less than {LOCATION_DESCRIPTION_MAX_LENGTH} characters"
            )

        whatsapp = _clean(data.get("whatsapp", business.whatsapp))
        if not is_valid_whatsapp(whatsapp):
            errors["whatsapp"] = "Please enter a valid WhatsApp number (+255...) or username (@username)"

        status = data.get("status", business.status)
        try:
            status = BusinessStatus(status)
        except ValueError:
            errors["status"] = "Status must be active, inactive or pending"

        if errors:
            raise ValidationFailed(errors)

        business.name = name
        business.phone_number = phone
        business.email = email
        business.description = description
        business.location_description = location
        business.whatsapp = whatsapp
        business.status = status
        for key in ("category", "address", "website", "operating_hours"):
            if key in data:
                setattr(business, key, _clean(data[key]))

        await self._session.commit()
        logger.info("Updated business information", business_id=str(business.id))
        return business

    async def update_reward_configuration(
        self,
        business: Business,
        *,
        points_conversion: Any,
        tin: str | None = None,
    ) -> Business:
        errors: dict[str, str] = {}
        low = Decimal(str(settings.points_conversion_min))
        high = Decimal(str(settings.points_conversion_max))
        try:
            conversion = Decimal(str(points_conversion))
        except (InvalidOperation, ValueError):
            conversion = None
        if conversion is None or not conversion.is_finite() or conversion < low or conversion > high:
            errors["points_conversion"] = f"Cashback percentage must be between {low.normalize():f}% and {high.normalize():f}%"

        clean_tin = _clean(tin)
        if clean_tin and len(clean_tin) < TIN_MIN_LENGTH:
            errors["tin"] = f"TIN must be at least {TIN_MIN_LENGTH} characters"

        if errors:
            raise ValidationFailed(errors)

        business.points_conversion = conversion
        business.tin = clean_tin
        await self._session.commit()
        logger.info(
            "Updated reward configuration",
            business_id=str(business.id),
            points_conversion=str(conversion),
        )
        return business

    async def update_brand_identity(self, business: Business, data: Mapping[str, Any]) -> Business:
        errors: dict[str, str] = {}
        carousel = data.get("carousel_images")
        if carousel is not None:
            carousel = [url.strip() for url in carousel if isinstance(url, str) and url.strip()]
            if len(carousel) > CAROUSEL_MAX_IMAGES:
                errors["carousel_images"] = f"A maximum of {CAROUSEL_MAX_IMAGES} carousel images is allowed"
        if "whatsapp" in data and not is_valid_whatsapp(data.get("whatsapp")):
            errors["whatsapp"] = "Please enter a valid WhatsApp number (+255...) or username (@username)"
        if errors:
            raise ValidationFailed(errors)

        for key in _BRAND_FIELDS:
            if key in data:
                setattr(business, key, _clean(data[key]))
        if carousel is not None:
            business.carousel_images = carousel
        if "operating_hours" in data:
            business.operating_hours = data["operating_hours"]

        await self._session.commit()
        logger.info("Updated brand identity", business_id=str(business.id))
        return business
